"""
Verselink Configuration Module

Centralized configuration for verse search and co-occurrence pairing.
Every size guard (term counts, pairing caps, proximity window) and every
scheduling knob lives here so that callers can override them per instance.

Also holds the canonical book tables used by testament filters and
canonical ordering.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# =============================================================================
# Instance-Based Configuration
# =============================================================================

@dataclass
class VerselinkConfig:
    """
    Instance-based configuration for Verselink.

    Each ``VerselinkConfig`` instance is self-contained and is passed
    through the call stack; there is no process-wide configuration state.

    Create from environment variables::

        config = VerselinkConfig.from_env()

    Or with explicit values::

        config = VerselinkConfig(max_proximity=10, max_total_pairings=500)
    """

    # ── Corpus ────────────────────────────────────────────────────
    corpus_path: Optional[str] = None
    header_prefixes: Tuple[str, ...] = ("KJV",)
    header_markers: Tuple[str, ...] = ("BibleProtector.com",)

    # ── Search terms ──────────────────────────────────────────────
    min_term_length: int = 2
    max_search_terms: int = 8
    max_search_terms_per_group: int = 8

    # ── Pairings ──────────────────────────────────────────────────
    max_total_pairings: int = 10000
    max_pairings_per_term_pair: int = 5000
    max_proximity: int = 100

    # ── Cooperative scheduling ────────────────────────────────────
    chunk_size: int = 50
    """Term pairs processed between two yields to the host."""
    yield_budget_ms: float = 100.0
    """Wall-clock budget since the last yield before yielding early."""

    # ── Consolidation ─────────────────────────────────────────────
    suppress_equivalent_labels: bool = False
    """If True, drop consolidated labels whose two terms are morphological
    variants of each other (e.g. recovered ``love ↔ loving``)."""

    # ── Logging ───────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ── Factory ───────────────────────────────────────────────────

    @classmethod
    def from_env(cls) -> "VerselinkConfig":
        """Build a config snapshot from current environment variables."""
        return cls(
            corpus_path=os.getenv("VERSELINK_CORPUS_PATH") or None,
            max_proximity=int(os.getenv("VERSELINK_MAX_PROXIMITY", "100")),
            max_total_pairings=int(os.getenv("VERSELINK_MAX_TOTAL_PAIRINGS", "10000")),
            log_level=os.getenv("VERSELINK_LOG_LEVEL", "INFO").upper(),
        )

    # ── Validation ────────────────────────────────────────────────

    def validate(self) -> bool:
        """
        Check that every limit is usable.

        Raises :class:`~verselink.exceptions.ConfigError` on failure.
        """
        from verselink.exceptions import ConfigError

        positive = {
            "min_term_length": self.min_term_length,
            "max_search_terms": self.max_search_terms,
            "max_search_terms_per_group": self.max_search_terms_per_group,
            "max_total_pairings": self.max_total_pairings,
            "max_pairings_per_term_pair": self.max_pairings_per_term_pair,
            "chunk_size": self.chunk_size,
        }
        for name, value in positive.items():
            if value < 1:
                raise ConfigError(f"{name} must be >= 1 (got {value}).")

        if self.max_proximity < 0:
            raise ConfigError(f"max_proximity must be >= 0 (got {self.max_proximity}).")
        if self.yield_budget_ms <= 0:
            raise ConfigError(f"yield_budget_ms must be > 0 (got {self.yield_budget_ms}).")
        return True


# =============================================================================
# Canon Tables
# =============================================================================

class Canon:
    """Book names of the KJV canon, in canonical order."""

    OLD_TESTAMENT_BOOKS: List[str] = [
        "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy",
        "Joshua", "Judges", "Ruth", "1 Samuel", "2 Samuel",
        "1 Kings", "2 Kings", "1 Chronicles", "2 Chronicles",
        "Ezra", "Nehemiah", "Esther", "Job", "Psalms", "Proverbs",
        "Ecclesiastes", "Song of Solomon", "Isaiah", "Jeremiah",
        "Lamentations", "Ezekiel", "Daniel", "Hosea", "Joel",
        "Amos", "Obadiah", "Jonah", "Micah", "Nahum",
        "Habakkuk", "Zephaniah", "Haggai", "Zechariah", "Malachi",
    ]

    NEW_TESTAMENT_BOOKS: List[str] = [
        "Matthew", "Mark", "Luke", "John", "Acts",
        "Romans", "1 Corinthians", "2 Corinthians", "Galatians",
        "Ephesians", "Philippians", "Colossians", "1 Thessalonians",
        "2 Thessalonians", "1 Timothy", "2 Timothy", "Titus",
        "Philemon", "Hebrews", "James", "1 Peter", "2 Peter",
        "1 John", "2 John", "3 John", "Jude", "Revelation",
    ]

    TESTAMENTS: Tuple[str, ...] = ("old", "new")

    # Unknown books sort after Revelation
    UNKNOWN_BOOK_ORDER: int = 999

    BOOK_ORDER: Dict[str, int] = {
        name: idx + 1
        for idx, name in enumerate(OLD_TESTAMENT_BOOKS + NEW_TESTAMENT_BOOKS)
    }

    @classmethod
    def books_for_testament(cls, testament: Optional[str] = None) -> List[str]:
        """Return the books of *testament*, or every book when it is None."""
        if testament == "old":
            return list(cls.OLD_TESTAMENT_BOOKS)
        if testament == "new":
            return list(cls.NEW_TESTAMENT_BOOKS)
        return cls.OLD_TESTAMENT_BOOKS + cls.NEW_TESTAMENT_BOOKS

    @classmethod
    def testament_of(cls, book: str) -> Optional[str]:
        """Return ``'old'``, ``'new'`` or None for a book outside the canon."""
        if book in cls.OLD_TESTAMENT_BOOKS:
            return "old"
        if book in cls.NEW_TESTAMENT_BOOKS:
            return "new"
        return None

    @classmethod
    def book_order(cls, book: str) -> int:
        return cls.BOOK_ORDER.get(book, cls.UNKNOWN_BOOK_ORDER)
