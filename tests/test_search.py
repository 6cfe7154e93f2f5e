"""
Tests for verselink.core.search — VerseSearchEngine, SearchFilters and
filter counts.
"""

import pytest

from verselink.core.search import FilterCounts, MatchBounds, SearchFilters
from verselink.exceptions import FilterError


# =============================================================================
# Search
# =============================================================================

class TestSearch:
    """Term search in corpus order with match bounds."""

    def test_earth_in_both_genesis_verses(self, genesis_engine):
        results = genesis_engine.search(["earth"])
        assert [r.verse.reference for r in results] == ["Genesis 1:1", "Genesis 1:2"]
        for r in results:
            assert len(r.matches) == 1
            m = r.matches[0]
            assert m.term == "earth"
            assert r.verse.text[m.start:m.end] == "earth"

    def test_short_term_ignored(self, genesis_engine):
        with_short = genesis_engine.search(["a", "earth"])
        alone = genesis_engine.search(["earth"])
        assert with_short == alone

    def test_empty_and_invalid_terms(self, genesis_engine):
        assert genesis_engine.search([]) == []
        assert genesis_engine.search(["a", " "]) == []

    def test_results_in_position_order(self, sample_engine):
        results = sample_engine.search(["love", "light", "god", "faith"])
        positions = [r.verse.position for r in results]
        assert positions == sorted(positions)
        assert len(positions) == len(set(positions))

    def test_all_bounds_of_all_terms(self, sample_engine):
        results = sample_engine.search(["light", "darkness"])
        john = next(r for r in results if r.verse.reference == "John 1:5")
        assert len(john.matches) == 3
        assert john.terms == ["light", "darkness"]
        for m in john.matches:
            assert john.verse.text[m.start:m.end].lower().startswith(m.term)

    def test_terms_normalized(self, sample_engine):
        results = sample_engine.search(["  LIGHT "])
        assert {m.term for r in results for m in r.matches} == {"light"}

    def test_no_match(self, sample_engine):
        assert sample_engine.search(["zebra"]) == []

    def test_term_limit(self, sample_engine):
        terms = ["light", "love", "faith", "hope", "god", "lord", "earth", "heaven", "darkness"]
        results = sample_engine.search(terms)
        assert "darkness" not in {m.term for r in results for m in r.matches}

    def test_to_dict(self, genesis_engine):
        data = genesis_engine.search(["heaven"])[0].to_dict()
        assert data["verse"]["reference"] == "Genesis 1:1"
        assert data["matches"][0]["term"] == "heaven"


# =============================================================================
# Filters
# =============================================================================

class TestSearchFilters:
    """Testament and book predicates."""

    def test_testament_new(self, sample_engine):
        results = sample_engine.search(["light"], SearchFilters(testament="new"))
        assert [r.verse.reference for r in results] == ["John 1:5"]

    def test_testament_old(self, sample_engine):
        results = sample_engine.search(["light"], SearchFilters(testament="old"))
        assert [r.verse.book for r in results] == ["Genesis", "Genesis"]

    def test_books(self, sample_engine):
        results = sample_engine.search(["god"], SearchFilters(books={"Romans", "1 John"}))
        assert {r.verse.book for r in results} == {"Romans", "1 John"}

    def test_testament_and_books_intersect(self, sample_engine):
        filters = SearchFilters(testament="old", books={"John"})
        assert sample_engine.search(["light"], filters) == []

    def test_books_coerced_to_frozenset(self):
        assert SearchFilters(books=["John"]).books == frozenset({"John"})

    def test_unknown_testament(self):
        with pytest.raises(FilterError):
            SearchFilters(testament="apocrypha")

    def test_negative_proximity(self):
        with pytest.raises(FilterError):
            SearchFilters(max_proximity=-1)

    def test_is_empty(self):
        assert SearchFilters().is_empty
        assert not SearchFilters(testament="new").is_empty
        assert SearchFilters(max_proximity=3).is_empty


# =============================================================================
# Term map & counts
# =============================================================================

class TestTermMapAndCounts:

    def test_find_verses_for_terms(self, sample_engine):
        mapping = sample_engine.find_verses_for_terms(["light", "love"])
        assert [v.position for v in mapping["light"]] == [2, 3, 6]
        assert [v.position for v in mapping["love"]] == [7, 10]

    def test_find_verses_for_terms_filtered(self, sample_engine):
        mapping = sample_engine.find_verses_for_terms(["light"], SearchFilters(testament="old"))
        assert [v.position for v in mapping["light"]] == [2, 3]

    def test_term_without_matches_maps_to_empty(self, sample_engine):
        assert sample_engine.find_verses_for_terms(["zebra"]) == {"zebra": []}

    def test_filter_counts(self, sample_engine):
        counts = sample_engine.filter_counts(["light"])
        assert isinstance(counts, FilterCounts)
        assert counts.total == 3
        assert counts.old_testament == 2
        assert counts.new_testament == 1
        assert counts.books["Genesis"] == 2
        assert counts.books["John"] == 1
        assert counts.books["Exodus"] == 0

    def test_filter_counts_empty_terms(self, sample_engine):
        counts = sample_engine.filter_counts([])
        assert counts.total == 0
        assert len(counts.books) == 66

    def test_match_bounds_to_dict(self):
        assert MatchBounds("faith", 3, 8).to_dict() == {"term": "faith", "start": 3, "end": 8}
