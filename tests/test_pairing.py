"""
Tests for verselink.core.pairing and verselink.core.generator — pairing
enumeration, candidate prioritization and end-to-end pairing runs.
"""

from typing import List

import pytest

from verselink.core.config import VerselinkConfig
from verselink.core.corpus import Verse
from verselink.core.generator import PairingGenerator
from verselink.core.pairing import (
    VersePairing,
    build_between_groups_candidates,
    build_within_group_candidates,
    find_pairings_for_terms,
    make_label,
    pairing_key,
    term_priority,
)
from verselink.core.search import SearchFilters
from verselink.core.terms import same_word


def _verses(*positions: int) -> List[Verse]:
    return [
        Verse(book="Genesis", chapter=1, number=p + 1, text=f"verse {p}",
              reference=f"Genesis 1:{p + 1}", position=p)
        for p in positions
    ]


# =============================================================================
# Data model
# =============================================================================

class TestVersePairing:

    def test_single_verse_key_and_label(self):
        p = VersePairing(verses=tuple(_verses(3)), term1="hope", term2="faith", proximity=0)
        assert p.key == "same-3"
        assert p.label == "hope ↔ faith"
        assert p.labels == ["hope ↔ faith"]

    def test_two_verse_key(self):
        p = VersePairing(verses=tuple(_verses(2, 7)), term1="a1", term2="b1", proximity=5)
        assert p.key == "pair-2-7"
        assert p.positions == (2, 7)

    def test_proximity_must_match_verse_count(self):
        with pytest.raises(ValueError):
            VersePairing(verses=tuple(_verses(2, 7)), term1="aa", term2="bb", proximity=0)
        with pytest.raises(ValueError):
            VersePairing(verses=tuple(_verses(2)), term1="aa", term2="bb", proximity=1)

    def test_verse_count_bounds(self):
        with pytest.raises(ValueError):
            VersePairing(verses=tuple(_verses(1, 2, 3)), term1="aa", term2="bb", proximity=1)

    def test_pairing_key_independent_of_order(self):
        v = _verses(4, 9)
        assert pairing_key(v) == pairing_key(list(reversed(v))) == "pair-4-9"

    def test_make_label_alphabetical(self):
        assert make_label("hope", "faith") == "faith ↔ hope"

    def test_to_dict(self):
        p = VersePairing(verses=tuple(_verses(0)), term1="aa", term2="bb", proximity=0,
                         all_term_pairs=("aa ↔ bb",))
        data = p.to_dict()
        assert data["proximity"] == 0
        assert data["all_term_pairs"] == ["aa ↔ bb"]
        assert data["verses"][0]["position"] == 0


# =============================================================================
# find_pairings_for_terms
# =============================================================================

class TestFindPairingsForTerms:

    def test_same_verse_before_proximity(self):
        result = find_pairings_for_terms("aa", "bb", _verses(0, 5), _verses(0, 3))
        assert [p.key for p in result] == ["same-0", "pair-0-3", "pair-0-5", "pair-3-5"]
        assert result[0].proximity == 0
        assert [p.proximity for p in result[1:]] == [3, 5, 2]

    def test_proximity_window(self):
        result = find_pairings_for_terms("aa", "bb", _verses(0), _verses(5, 50), max_proximity=10)
        assert [p.key for p in result] == ["pair-0-5"]

    def test_zero_window_keeps_same_verse_only(self):
        result = find_pairings_for_terms("aa", "bb", _verses(0, 1), _verses(0, 1), max_proximity=0)
        assert [p.key for p in result] == ["same-0", "same-1"]

    def test_symmetric_pairs_deduplicated(self):
        result = find_pairings_for_terms("aa", "bb", _verses(0, 1), _verses(0, 1))
        assert [p.key for p in result] == ["same-0", "same-1", "pair-0-1"]

    def test_per_pair_cap_is_a_prefix(self):
        full = find_pairings_for_terms("aa", "bb", _verses(0, 1, 2), _verses(0, 1, 2))
        capped = find_pairings_for_terms(
            "aa", "bb", _verses(0, 1, 2), _verses(0, 1, 2), max_pairings=4,
        )
        assert len(capped) == 4
        assert capped == full[:4]

    def test_verses_sorted_within_pairing(self):
        result = find_pairings_for_terms("aa", "bb", _verses(8), _verses(2))
        assert result[0].positions == (2, 8)

    def test_no_overlap(self):
        assert find_pairings_for_terms("aa", "bb", [], _verses(1)) == []

    def test_between_groups_flag(self):
        result = find_pairings_for_terms("aa", "bb", _verses(0), _verses(0), True)
        assert result[0].is_between_groups


# =============================================================================
# Candidates & priority
# =============================================================================

class TestCandidates:

    def test_term_priority(self):
        assert term_priority(10, 10) == 1000
        assert term_priority(50, 60) == 4500
        assert term_priority(1, 200) == 1

    def test_within_group_skips_equivalent_terms(self):
        ttv = {"love": _verses(0, 1, 2), "loving": _verses(3), "hope": _verses(4, 5, 6)}
        candidates = build_within_group_candidates(["love", "loving", "hope"], ttv)
        assert [(c.term1, c.term2) for c in candidates] == [("love", "hope"), ("loving", "hope")]
        assert [c.priority for c in candidates] == [300, 98]

    def test_ties_keep_enumeration_order(self):
        candidates = build_within_group_candidates(["faith", "hope", "light"], {})
        assert [(c.term1, c.term2) for c in candidates] == [
            ("faith", "hope"), ("faith", "light"), ("hope", "light"),
        ]

    def test_between_groups_same_term_excluded(self):
        assert build_between_groups_candidates(["heaven"], ["heaven"], {}) == []

    def test_between_groups_unordered_duplicates(self):
        candidates = build_between_groups_candidates(["light", "dark"], ["dark", "light"], {})
        assert [(c.term1, c.term2) for c in candidates] == [("light", "dark")]


# =============================================================================
# PairingGenerator — end to end
# =============================================================================

class TestPairingGenerator:

    def test_heaven_earth_within_group(self, genesis_engine):
        result = PairingGenerator(genesis_engine).generate_all_pairings(["heaven", "earth"])
        same = [p for p in result.pairings if p.proximity == 0]
        assert len(same) == 1
        assert same[0].verses[0].reference == "Genesis 1:1"
        # "heaven" occurs only in the first verse, so every pairing includes it
        assert all(0 in p.positions for p in result.pairings)

    def test_heaven_vs_earth_between_groups(self, genesis_engine):
        result = PairingGenerator(genesis_engine).generate_between_groups_pairings(
            ["heaven"], ["earth"],
        )
        same = [p for p in result.pairings if p.proximity == 0]
        assert len(same) == 1
        assert same[0].verses[0].reference == "Genesis 1:1"
        assert all(p.is_between_groups for p in result.pairings)

    def test_same_term_both_groups_yields_nothing(self, genesis_engine):
        result = PairingGenerator(genesis_engine).generate_between_groups_pairings(
            ["heaven"], ["heaven"],
        )
        assert result.pairings == []
        assert result.total == 0

    def test_equivalent_terms_never_paired(self, sample_engine):
        result = PairingGenerator(sample_engine).generate_all_pairings(["love", "loveth", "god"])
        assert result.total == 2
        for p in result.pairings:
            assert not same_word(p.term1, p.term2)

    def test_proximity_invariant(self, sample_engine):
        cfg = VerselinkConfig(max_proximity=3)
        gen = PairingGenerator(sample_engine, cfg)
        result = gen.generate_all_pairings(["light", "darkness", "god", "faith", "hope"])
        assert result.pairings
        for p in result.pairings:
            assert (p.proximity == 0) == (len(p.verses) == 1)
            if len(p.verses) == 2:
                assert p.proximity == abs(p.verses[0].position - p.verses[1].position)
                assert p.proximity <= 3

    def test_filter_proximity_override(self, sample_engine):
        result = PairingGenerator(sample_engine).generate_all_pairings(
            ["light", "darkness"], SearchFilters(max_proximity=0),
        )
        assert result.pairings
        assert all(p.proximity == 0 for p in result.pairings)

    def test_testament_filter(self, sample_engine):
        result = PairingGenerator(sample_engine).generate_all_pairings(
            ["light", "darkness"], SearchFilters(testament="new"),
        )
        assert [p.key for p in result.pairings] == ["same-6"]

    def test_runs_are_repeatable(self, sample_engine):
        gen = PairingGenerator(sample_engine)
        terms = ["light", "darkness", "god", "faith", "hope"]
        first = gen.generate_all_pairings(terms)
        second = gen.generate_all_pairings(terms)
        assert {(p.key, p.all_term_pairs) for p in first.pairings} == {
            (p.key, p.all_term_pairs) for p in second.pairings
        }

    @pytest.mark.parametrize("cap", [1, 2, 5])
    def test_global_cap(self, sample_engine, cap):
        cfg = VerselinkConfig(max_total_pairings=cap)
        result = PairingGenerator(sample_engine, cfg).generate_all_pairings(
            ["light", "darkness", "god", "the", "and"],
        )
        assert result.raw_count <= cap
        assert len(result.pairings) <= cap
        assert result.truncated

    def test_per_group_term_limit(self, sample_engine):
        cfg = VerselinkConfig(max_search_terms_per_group=1)
        result = PairingGenerator(sample_engine, cfg).generate_between_groups_pairings(
            ["light", "god"], ["darkness", "faith"],
        )
        assert result.total == 1

    def test_start_does_not_execute(self, sample_engine):
        run = PairingGenerator(sample_engine).start_all_pairings(["light", "darkness"])
        assert run.processed == 0
        assert not run.finished
        assert run.run().pairings
