"""
Verselink Client Facade

Single entry point for programmatic use of Verselink.  Wraps corpus
loading, verse search and co-occurrence pairing behind an instance-based
API with optional async support.

Usage::

    from verselink import Verselink

    client = Verselink()
    client.load("kjv.txt")

    for hit in client.search(["faith", "hope"]):
        print(hit.verse.reference, [m.term for m in hit.matches])

    result = client.pairings(["faith", "hope", "charity"])
    for pairing in result.pairings:
        print(pairing.proximity, pairing.labels)

    # Two independent term groups
    result = client.between_groups_pairings(["light"], ["darkness"])

    # Async variants (for asyncio hosts); a newer pairing request
    # supersedes any run still in flight.
    result = await client.apairings(["faith", "works"])
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from verselink.core.config import VerselinkConfig
from verselink.core.corpus import books_in_corpus, load_corpus, parse_corpus
from verselink.core.generator import PairingGenerator
from verselink.core.index import VerseIndex
from verselink.core.pairing import PairingResult
from verselink.core.scheduler import PairingRun, ProgressCallback, RequestTracker
from verselink.core.search import FilterCounts, SearchFilters, SearchResult, VerseSearchEngine
from verselink.core.terms import DEFAULT_EQUIVALENCE, WordEquivalence
from verselink.exceptions import ConfigError, CorpusUnavailableError, IndexNotReadyError

logger = logging.getLogger(__name__)


class Verselink:
    """
    High-level Verselink client.

    Each instance owns its configuration, index and request tracker and
    never touches global state.

    Args:
        config: Explicit configuration object.  When *None*, a config is
            built from environment variables plus keyword overrides.
        equivalence: Word-equivalence policy used to skip self-pairings.
        validate_on_init: Call :meth:`VerselinkConfig.validate` immediately.
        **kwargs: Forwarded to :class:`VerselinkConfig` when *config* is
            ``None`` (e.g. ``max_proximity=10``).

    Raises:
        ConfigError: A keyword is not a :class:`VerselinkConfig` field.
    """

    def __init__(
        self,
        config: VerselinkConfig | None = None,
        *,
        equivalence: WordEquivalence = DEFAULT_EQUIVALENCE,
        validate_on_init: bool = False,
        **kwargs,
    ):
        unknown = sorted(set(kwargs) - set(VerselinkConfig.__dataclass_fields__))
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(unknown)}")

        if config is not None:
            self._config = config
        elif kwargs:
            base = VerselinkConfig.from_env()
            merged = {
                f.name: kwargs.get(f.name, getattr(base, f.name))
                for f in base.__dataclass_fields__.values()
            }
            self._config = VerselinkConfig(**merged)
        else:
            self._config = VerselinkConfig.from_env()

        if validate_on_init:
            self._config.validate()

        self._equivalence = equivalence
        self._index: Optional[VerseIndex] = None
        self._engine: Optional[VerseSearchEngine] = None
        self._generator: Optional[PairingGenerator] = None
        self._source: Optional[str] = None
        self._requests = RequestTracker()

    # ── Configuration & state ─────────────────────────────────────

    @property
    def config(self) -> VerselinkConfig:
        """The active configuration for this client."""
        return self._config

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> VerseIndex:
        """The loaded index.

        Raises:
            IndexNotReadyError: If no corpus has been loaded yet.
        """
        if self._index is None:
            raise IndexNotReadyError(
                "No corpus loaded. Call load() or load_text() first."
            )
        return self._index

    # ── Loading ───────────────────────────────────────────────────

    def load(self, source: str | Path | None = None) -> VerseIndex:
        """
        Load the corpus file at *source* (default: ``config.corpus_path``)
        and build the index.  Replaces any previously loaded corpus.

        Raises:
            CorpusUnavailableError: No source configured, or it cannot be read.
        """
        source = source or self._config.corpus_path
        if not source:
            raise CorpusUnavailableError(
                "No corpus source given. Pass a path or set VERSELINK_CORPUS_PATH."
            )
        verses = load_corpus(source, self._config)
        self._source = str(source)
        return self._install(VerseIndex(verses))

    def load_text(self, text: str) -> VerseIndex:
        """Parse corpus text already in memory and build the index."""
        verses = parse_corpus(text, self._config)
        if not verses:
            raise CorpusUnavailableError("Corpus text contains no verse lines.")
        self._source = "<text>"
        return self._install(VerseIndex(verses))

    def _install(self, index: VerseIndex) -> VerseIndex:
        self._index = index
        self._engine = VerseSearchEngine(index, self._config)
        self._generator = PairingGenerator(self._engine, self._config, self._equivalence)
        # Runs started against the previous corpus are stale now
        self._requests.issue()
        return index

    # ── Search ────────────────────────────────────────────────────

    def search(
        self,
        terms: Iterable[str] | str,
        filters: SearchFilters | None = None,
    ) -> List[SearchResult]:
        """
        Find verses containing any of *terms*.

        Args:
            terms: Term list, or a raw whitespace-separated search string.
            filters: Optional testament / book filter.

        Returns:
            One :class:`SearchResult` per verse, in corpus order.

        Raises:
            IndexNotReadyError: If no corpus has been loaded.
        """
        return self._require_engine().search(_as_terms(terms), filters)

    def filter_counts(self, terms: Iterable[str] | str) -> FilterCounts:
        """Result counts overall, per testament and per book."""
        return self._require_engine().filter_counts(_as_terms(terms))

    # ── Pairings ──────────────────────────────────────────────────

    def start_pairings(
        self,
        terms: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingRun:
        """
        Prepare a within-group pairing run for a host-driven loop.

        Starting a run supersedes every earlier run of this client.
        """
        generator = self._require_generator()
        return generator.start_all_pairings(
            _as_terms(terms), filters,
            on_progress=on_progress, token=self._requests.issue(),
        )

    def start_between_groups_pairings(
        self,
        group1: Iterable[str] | str,
        group2: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingRun:
        """Prepare a between-groups pairing run (supersedes earlier runs)."""
        generator = self._require_generator()
        return generator.start_between_groups_pairings(
            _as_terms(group1), _as_terms(group2), filters,
            on_progress=on_progress, token=self._requests.issue(),
        )

    def pairings(
        self,
        terms: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingResult:
        """Pair the terms of one set with each other, to completion."""
        return self.start_pairings(terms, filters, on_progress=on_progress).run()

    def between_groups_pairings(
        self,
        group1: Iterable[str] | str,
        group2: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingResult:
        """Pair each term of *group1* with the terms of *group2*, to completion."""
        return self.start_between_groups_pairings(
            group1, group2, filters, on_progress=on_progress,
        ).run()

    # ── Statistics ────────────────────────────────────────────────

    def stats(self) -> Dict[str, int]:
        """Verse, book and indexed-word counts of the loaded corpus."""
        index = self.index
        return {
            "verses": len(index),
            "books": len(books_in_corpus(index.verses)),
            "words": index.word_count,
        }

    # ── Async variants ────────────────────────────────────────────
    # Search and stats run off the event loop via asyncio.to_thread();
    # pairing runs stay on the loop and yield to it between chunks.

    async def asearch(
        self,
        terms: Iterable[str] | str,
        filters: SearchFilters | None = None,
    ) -> List[SearchResult]:
        """Async variant of :meth:`search`. Raises same exceptions as sync."""
        return await asyncio.to_thread(self.search, terms, filters)

    async def apairings(
        self,
        terms: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingResult:
        """Async variant of :meth:`pairings`; result is ``cancelled`` if superseded."""
        run = self.start_pairings(terms, filters, on_progress=on_progress)
        return await run.arun()

    async def abetween_groups_pairings(
        self,
        group1: Iterable[str] | str,
        group2: Iterable[str] | str,
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PairingResult:
        """Async variant of :meth:`between_groups_pairings`."""
        run = self.start_between_groups_pairings(
            group1, group2, filters, on_progress=on_progress,
        )
        return await run.arun()

    async def astats(self) -> Dict[str, int]:
        """Async variant of :meth:`stats`. Raises same exceptions as sync."""
        return await asyncio.to_thread(self.stats)

    # ── Health (for agents / status endpoints) ─────────────────────

    def health(self) -> Dict[str, object]:
        """Small status dict for readiness probes; never raises."""
        return {
            "version": __import__("verselink", fromlist=["__version__"]).__version__,
            "loaded": self.is_loaded,
            "source": self._source,
            "verses": len(self._index) if self._index is not None else 0,
        }

    # ── Internal helpers ──────────────────────────────────────────

    def _require_engine(self) -> VerseSearchEngine:
        if self._engine is None:
            raise IndexNotReadyError("No corpus loaded. Call load() or load_text() first.")
        return self._engine

    def _require_generator(self) -> PairingGenerator:
        if self._generator is None:
            raise IndexNotReadyError("No corpus loaded. Call load() or load_text() first.")
        return self._generator


def _as_terms(terms: Iterable[str] | str) -> List[str]:
    """Accept a term list or a raw whitespace-separated search string."""
    if isinstance(terms, str):
        return terms.split()
    return list(terms)
