"""
Verselink — verse search and word co-occurrence pairing for the KJV.

The ``verselink`` package parses a line-oriented Bible text into
addressable verses, searches them with word-prefix matching, and finds
pairs of verses (or single verses) where two different search words occur
within a bounded distance of each other.

Quick start (programmatic API)::

    from verselink import Verselink

    client = Verselink()
    client.load("kjv.txt")
    hits = client.search(["faith"])
    edges = client.pairings(["faith", "hope", "charity"]).pairings

Quick start (CLI)::

    verselink search faith --corpus kjv.txt
    verselink pairings light --with darkness --corpus kjv.txt

Configuration override::

    from verselink import Verselink, VerselinkConfig

    client = Verselink(config=VerselinkConfig(max_proximity=5))
"""

__version__ = "1.0.0"

# Primary public API — the Verselink facade
from verselink.client import Verselink

# Configuration
from verselink.core.config import VerselinkConfig

# Core data types that callers interact with
from verselink.core.corpus import Verse
from verselink.core.pairing import PairingResult, VersePairing
from verselink.core.search import FilterCounts, MatchBounds, SearchFilters, SearchResult
from verselink.core.terms import WordEquivalence

# Exception hierarchy
from verselink.exceptions import (
    ConfigError,
    CorpusUnavailableError,
    FilterError,
    IndexNotReadyError,
    VerselinkError,
)


def health(config: VerselinkConfig | None = None) -> dict:
    """
    Return a small status dict for agents or health checks (no corpus load).

    When *config* is None, uses :meth:`VerselinkConfig.from_env()`.
    """
    cfg = config or VerselinkConfig.from_env()
    return {
        "version": __version__,
        "corpus_path": cfg.corpus_path,
        "max_proximity": cfg.max_proximity,
    }


__all__ = [
    "__version__",
    # Facade
    "Verselink",
    # Config
    "VerselinkConfig",
    # Data types
    "Verse",
    "MatchBounds",
    "SearchResult",
    "SearchFilters",
    "FilterCounts",
    "VersePairing",
    "PairingResult",
    "WordEquivalence",
    # Exceptions
    "VerselinkError",
    "ConfigError",
    "CorpusUnavailableError",
    "IndexNotReadyError",
    "FilterError",
    # Status
    "health",
]
