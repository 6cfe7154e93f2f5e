"""
Tests for verselink.core.matcher and verselink.core.index — the shared
word-prefix rule and the inverted index that accelerates it.
"""

import pytest

from verselink.core import matcher
from verselink.core.corpus import parse_corpus
from verselink.core.index import VerseIndex

GEN_1_1 = "In the beginning God created the heaven and the earth."


# =============================================================================
# Word-boundary matching
# =============================================================================

class TestFindMatches:
    """``\\b<term>\\w*`` semantics."""

    def test_whole_word(self):
        start = GEN_1_1.index("earth")
        assert matcher.find_matches(GEN_1_1, "earth") == [(start, start + 5)]

    def test_prefix_extends_to_word_end(self):
        assert matcher.find_matches("be thou faithful unto death", "faith") == [(8, 16)]

    def test_mid_word_never_matches(self):
        text = "and their heir was there"
        spans = matcher.find_matches(text, "heir")
        assert spans == [(text.index(" heir") + 1, text.index(" heir") + 5)]
        assert matcher.find_matches("they and their", "heir") == []
        assert not matcher.test_match("they and their", "heir")

    def test_case_insensitive(self):
        assert matcher.find_matches("The LORD is my shepherd", "lord") == [(4, 8)]
        assert matcher.test_match("The LORD is my shepherd", "LORD")

    def test_multiple_non_overlapping_left_to_right(self):
        text = "Let there be light: and there was light."
        spans = matcher.find_matches(text, "light")
        assert spans == [(13, 18), (34, 39)]

    def test_regex_metacharacters_escaped(self):
        assert matcher.find_matches("the LORD's house", "lord's") == [(4, 10)]
        assert not matcher.test_match("axb", "a.b")

    def test_no_match(self):
        assert matcher.find_matches(GEN_1_1, "darkness") == []
        assert not matcher.test_match(GEN_1_1, "darkness")

    @pytest.mark.parametrize("term", ["in", "beginning", "god", "heaven", "the"])
    def test_every_span_starts_at_word_boundary(self, term):
        for start, end in matcher.find_matches(GEN_1_1, term):
            assert start == 0 or not GEN_1_1[start - 1].isalnum()
            assert GEN_1_1[start:end].lower().startswith(term)

    def test_pattern_cached(self):
        assert matcher.word_boundary_pattern("faith") is matcher.word_boundary_pattern("faith")


class TestTokenize:

    def test_tokenize_strips_punctuation(self):
        assert matcher.tokenize("Let there be light: and") == ["let", "there", "be", "light", "and"]

    def test_index_words_include_hyphen_parts(self):
        words = matcher.index_words("my fellow-servant")
        assert {"my", "fellowservant", "fellow", "servant"} <= words

    def test_is_plain_word(self):
        assert matcher.is_plain_word("faith")
        assert not matcher.is_plain_word("lord's")


# =============================================================================
# VerseIndex
# =============================================================================

class TestVerseIndex:
    """Inverted index: prefix lookup confirmed by the matcher."""

    @pytest.fixture
    def index(self, sample_verses):
        return VerseIndex(sample_verses)

    def test_len_and_vocabulary(self, index):
        assert len(index) == 11
        assert index.word_count > 50

    def test_verses_for_word(self, index):
        assert [v.position for v in index.verses_for_word("light")] == [2, 3, 6]

    def test_words_with_prefix(self, index):
        assert index.words_with_prefix("dark") == ["darkness"]
        assert index.words_with_prefix("zzz") == []

    def test_candidates_prefix(self, index):
        assert [v.position for v in index.candidates("dark")] == [1, 3, 6]

    def test_candidates_exclude_mid_word(self, index):
        # "heart"/"hearts" contain "ear" but do not start with it
        assert [v.position for v in index.candidates("ear")] == [0, 1]

    def test_candidates_with_punctuation_scan(self, index):
        assert [v.position for v in index.candidates("light:")] == [2]

    def test_candidates_empty_term(self, index):
        assert index.candidates("   ") == []

    def test_hyphenated_word_found(self):
        verses = parse_corpus(
            "Matthew 18:33 Shouldest not thou also have had compassion on thy fellow-servant\n"
        )
        assert len(VerseIndex(verses).candidates("servant")) == 1

    @pytest.mark.parametrize("term", ["god", "the", "hope", "love", "lord", "not", "th"])
    def test_candidates_equal_full_scan(self, index, sample_verses, term):
        scanned = [v for v in sample_verses if matcher.test_match(v.text, term)]
        assert index.candidates(term) == scanned

    def test_candidate_positions_union(self, index):
        assert index.candidate_positions(["light", "love"]) == [2, 3, 6, 7, 10]

    def test_verse_at(self, index):
        assert index.verse_at(3).reference == "Genesis 1:4"
        assert index.verse_at(99) is None
