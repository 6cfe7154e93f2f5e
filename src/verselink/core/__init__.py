"""
Verselink Core — corpus parsing, matching, search, pairing and scheduling.

Re-exports the primary classes for convenience::

    from verselink.core import VerseIndex, VerseSearchEngine, PairingGenerator
"""

from verselink.core.config import Canon, VerselinkConfig
from verselink.core.consolidate import consolidate_pairings, sort_pairings
from verselink.core.corpus import Verse, load_corpus, parse_corpus
from verselink.core.generator import PairingGenerator
from verselink.core.index import VerseIndex
from verselink.core.matcher import find_matches, test_match
from verselink.core.pairing import (
    PairingResult,
    TermPair,
    VersePairing,
    find_pairings_for_terms,
    pairing_key,
)
from verselink.core.scheduler import PairingRun, Progress, RequestToken, RequestTracker
from verselink.core.search import (
    FilterCounts,
    MatchBounds,
    SearchFilters,
    SearchResult,
    VerseSearchEngine,
)
from verselink.core.terms import WordEquivalence, limit_and_validate, normalize, same_word

__all__ = [
    "Canon",
    "VerselinkConfig",
    "Verse",
    "load_corpus",
    "parse_corpus",
    "VerseIndex",
    "find_matches",
    "test_match",
    "normalize",
    "limit_and_validate",
    "same_word",
    "WordEquivalence",
    "MatchBounds",
    "SearchResult",
    "SearchFilters",
    "FilterCounts",
    "VerseSearchEngine",
    "VersePairing",
    "TermPair",
    "PairingResult",
    "find_pairings_for_terms",
    "pairing_key",
    "PairingGenerator",
    "PairingRun",
    "Progress",
    "RequestToken",
    "RequestTracker",
    "consolidate_pairings",
    "sort_pairings",
]
