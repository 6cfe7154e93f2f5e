"""
Verselink Pairing Generator

Entry points for co-occurrence pairing:

- **Within-group** — every unordered pair of terms from one term set
- **Between-groups** — one term from each of two independent term sets

Both build the prioritized candidate list, drive it through a
:class:`~verselink.core.scheduler.PairingRun`, and consolidate the raw
pairings by verse set.  ``generate_*`` run to completion; ``start_*``
return the run so the host decides when each chunk executes.
"""

import logging
from functools import partial
from typing import Dict, Iterable, List, Optional, Sequence

from verselink.core.config import VerselinkConfig
from verselink.core.consolidate import consolidate_pairings
from verselink.core.corpus import Verse
from verselink.core.pairing import (
    PairingResult,
    build_between_groups_candidates,
    build_within_group_candidates,
)
from verselink.core.scheduler import PairingRun, ProgressCallback, RequestToken
from verselink.core.search import SearchFilters, VerseSearchEngine
from verselink.core.terms import DEFAULT_EQUIVALENCE, WordEquivalence

logger = logging.getLogger(__name__)


class PairingGenerator:
    """
    Co-occurrence pairing over a :class:`VerseSearchEngine`.

    Args:
        engine: Search engine whose index and matcher select each term's verses.
        config: Limits; defaults to the engine's configuration.
        equivalence: Word-equivalence policy used to skip self-pairings.
    """

    def __init__(
        self,
        engine: VerseSearchEngine,
        config: VerselinkConfig | None = None,
        equivalence: WordEquivalence = DEFAULT_EQUIVALENCE,
    ):
        self._engine = engine
        self._config = config or engine.config
        self._equivalence = equivalence

    @property
    def equivalence(self) -> WordEquivalence:
        return self._equivalence

    # ── Within one term set ───────────────────────────────────────

    def start_all_pairings(
        self,
        terms: Iterable[str],
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[RequestToken] = None,
    ) -> PairingRun:
        """Prepare a within-group run without executing any of it."""
        valid = self._engine.prepare_terms(terms, self._config.max_search_terms)
        term_to_verses = self._engine.find_verses_for_terms(valid, filters)
        candidates = build_within_group_candidates(valid, term_to_verses, self._equivalence)
        logger.debug(f"Within-group pairing: {len(valid)} terms, {len(candidates)} term pairs")

        return self._make_run(
            candidates, term_to_verses, filters,
            is_between_groups=False,
            on_progress=on_progress, token=token,
        )

    def generate_all_pairings(
        self,
        terms: Iterable[str],
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[RequestToken] = None,
    ) -> PairingResult:
        """Pair every two distinct, non-equivalent terms of *terms*."""
        return self.start_all_pairings(
            terms, filters, on_progress=on_progress, token=token,
        ).run()

    # ── Between two term groups ───────────────────────────────────

    def start_between_groups_pairings(
        self,
        group1: Iterable[str],
        group2: Iterable[str],
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[RequestToken] = None,
    ) -> PairingRun:
        """Prepare a between-groups run without executing any of it."""
        per_group = self._config.max_search_terms_per_group
        terms1 = self._engine.prepare_terms(group1, per_group)
        terms2 = self._engine.prepare_terms(group2, per_group)
        term_to_verses = self._engine.find_verses_for_terms(terms1 + terms2, filters)
        candidates = build_between_groups_candidates(
            terms1, terms2, term_to_verses, self._equivalence,
        )
        logger.debug(
            f"Between-groups pairing: {len(terms1)} x {len(terms2)} terms, "
            f"{len(candidates)} term pairs"
        )

        return self._make_run(
            candidates, term_to_verses, filters,
            is_between_groups=True,
            on_progress=on_progress, token=token,
            group1=terms1, group2=terms2,
        )

    def generate_between_groups_pairings(
        self,
        group1: Iterable[str],
        group2: Iterable[str],
        filters: SearchFilters | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[RequestToken] = None,
    ) -> PairingResult:
        """Pair each term of *group1* with each non-equivalent term of *group2*."""
        return self.start_between_groups_pairings(
            group1, group2, filters, on_progress=on_progress, token=token,
        ).run()

    # ── Internal helpers ──────────────────────────────────────────

    def _make_run(
        self,
        candidates,
        term_to_verses: Dict[str, List[Verse]],
        filters: SearchFilters | None,
        *,
        is_between_groups: bool,
        on_progress: Optional[ProgressCallback],
        token: Optional[RequestToken],
        group1: Optional[Sequence[str]] = None,
        group2: Optional[Sequence[str]] = None,
    ) -> PairingRun:
        consolidator = partial(
            consolidate_pairings,
            term_to_verses=term_to_verses,
            group1=group1,
            group2=group2,
            equivalence=self._equivalence,
            suppress_equivalent_labels=self._config.suppress_equivalent_labels,
        )
        max_proximity = filters.max_proximity if filters is not None else None
        return PairingRun(
            candidates,
            term_to_verses,
            self._config,
            is_between_groups=is_between_groups,
            max_proximity=max_proximity,
            on_progress=on_progress,
            token=token,
            consolidator=consolidator,
        )
