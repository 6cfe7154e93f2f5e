"""
Verselink Search Engine

Runs the shared matcher over the corpus for a set of terms and returns one
:class:`SearchResult` per matching verse, carrying every match bound of
every term, in corpus (position) order.

Also builds the ``term → verses`` map consumed by the pairing generator and
the consolidator, and the per-testament / per-book result counts used by
filter controls.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional

from verselink.core.config import Canon, VerselinkConfig
from verselink.core.corpus import Verse
from verselink.core.index import VerseIndex
from verselink.core.matcher import find_matches
from verselink.core.terms import limit_and_validate
from verselink.exceptions import FilterError

logger = logging.getLogger(__name__)


# =============================================================================
# Data Models
# =============================================================================

@dataclass(frozen=True)
class MatchBounds:
    """Half-open character range of one term occurrence in a verse's text."""
    term: str
    start: int
    end: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchResult:
    """One matching verse with all of its match bounds."""
    verse: Verse
    matches: List[MatchBounds]

    @property
    def terms(self) -> List[str]:
        """Distinct matched terms, in first-match order."""
        return list(dict.fromkeys(m.term for m in self.matches))

    def to_dict(self) -> dict:
        return {
            "verse": self.verse.to_dict(),
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass(frozen=True)
class SearchFilters:
    """
    Verse predicate.

    ``books`` is intersected with ``testament`` when both are set: a verse
    must belong to the testament AND to one of the books.
    """
    testament: Optional[str] = None
    books: Optional[FrozenSet[str]] = None
    max_proximity: Optional[int] = None
    """Per-query override of :attr:`VerselinkConfig.max_proximity`."""

    def __post_init__(self):
        if self.testament is not None and self.testament not in Canon.TESTAMENTS:
            raise FilterError(
                f"Unknown testament '{self.testament}'. "
                f"Supported: {', '.join(Canon.TESTAMENTS)}."
            )
        if self.books is not None and not isinstance(self.books, frozenset):
            object.__setattr__(self, "books", frozenset(self.books))
        if self.max_proximity is not None and self.max_proximity < 0:
            raise FilterError(f"max_proximity must be >= 0 (got {self.max_proximity}).")

    @property
    def is_empty(self) -> bool:
        return self.testament is None and not self.books

    def allows(self, verse: Verse) -> bool:
        if self.testament is not None:
            if Canon.testament_of(verse.book) != self.testament:
                return False
        if self.books:
            if verse.book not in self.books:
                return False
        return True


NO_FILTERS = SearchFilters()


@dataclass
class FilterCounts:
    """Result counts for a term set, overall and per testament / book."""
    total: int = 0
    old_testament: int = 0
    new_testament: int = 0
    books: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# Search Engine
# =============================================================================

class VerseSearchEngine:
    """
    Term search over a :class:`VerseIndex`.

    The engine has no suspension points: every call runs to completion.
    """

    def __init__(self, index: VerseIndex, config: VerselinkConfig | None = None):
        self._index = index
        self._config = config or VerselinkConfig()

    @property
    def index(self) -> VerseIndex:
        return self._index

    @property
    def config(self) -> VerselinkConfig:
        return self._config

    # ── Public API ────────────────────────────────────────────────

    def prepare_terms(self, terms: Iterable[str], max_count: int | None = None) -> List[str]:
        """Normalize, validate and cap *terms* with this engine's limits."""
        return limit_and_validate(
            terms,
            max_count or self._config.max_search_terms,
            self._config.min_term_length,
        )

    def search(self, terms: Iterable[str], filters: SearchFilters | None = None) -> List[SearchResult]:
        """
        Find every verse matching at least one of *terms*.

        Args:
            terms: Raw user terms; normalized and limited to
                ``max_search_terms`` first.
            filters: Optional testament / book predicate.

        Returns:
            One result per verse, sorted by verse position.
        """
        filters = filters or NO_FILTERS
        valid_terms = self.prepare_terms(terms)
        if not valid_terms:
            return []

        results: List[SearchResult] = []
        for position in self._index.candidate_positions(valid_terms):
            verse = self._index.verse_at(position)
            if verse is None or not filters.allows(verse):
                continue

            matches: List[MatchBounds] = []
            for term in valid_terms:
                for start, end in find_matches(verse.text, term):
                    matches.append(MatchBounds(term=term, start=start, end=end))

            if matches:
                results.append(SearchResult(verse=verse, matches=matches))

        results.sort(key=lambda r: r.verse.position)
        logger.debug(f"Search {valid_terms} → {len(results)} verse(s)")
        return results

    def find_verses_for_terms(
        self,
        terms: Iterable[str],
        filters: SearchFilters | None = None,
    ) -> Dict[str, List[Verse]]:
        """
        Map each term to the verses it matches (filters applied).

        Terms are used as given; callers normalize and limit them first.
        """
        filters = filters or NO_FILTERS
        term_to_verses: Dict[str, List[Verse]] = {}
        for term in terms:
            if term in term_to_verses:
                continue
            term_to_verses[term] = [
                verse for verse in self._index.candidates(term)
                if filters.allows(verse)
            ]
        return term_to_verses

    def filter_counts(self, terms: Iterable[str]) -> FilterCounts:
        """Count matching verses overall, per testament and per book."""
        counts = FilterCounts(books={book: 0 for book in Canon.books_for_testament()})
        for result in self.search(terms):
            book = result.verse.book
            counts.total += 1
            testament = Canon.testament_of(book)
            if testament == "old":
                counts.old_testament += 1
            elif testament == "new":
                counts.new_testament += 1
            counts.books[book] = counts.books.get(book, 0) + 1
        return counts
