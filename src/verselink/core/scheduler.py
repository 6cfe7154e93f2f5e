"""
Verselink Cooperative Scheduler

Drives pairing generation in bounded chunks so a large term set never
blocks the host's thread for long.  A :class:`PairingRun` is a resumable
task: :meth:`PairingRun.steps` is a generator that hands control back after
every ``chunk_size`` term pairs or ``yield_budget_ms`` of work, whichever
comes first.  Any host can drain it:

- :meth:`PairingRun.run` — synchronously, to completion
- :meth:`PairingRun.arun` — on an asyncio loop, yielding at each step
- a custom driver — ``for progress in run.steps(): ...``

Staleness guard: each run may carry a :class:`RequestToken`.  Before
resuming after a yield the run checks the token and aborts cleanly once a
newer request has superseded it (latest wins).
"""

import asyncio
import logging
import threading
import time
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple

from verselink.core.config import VerselinkConfig
from verselink.core.corpus import Verse
from verselink.core.pairing import (
    PairingResult,
    TermPair,
    VersePairing,
    find_pairings_for_terms,
    make_label,
)

logger = logging.getLogger(__name__)


class Progress(NamedTuple):
    processed: int
    total: int
    pairings: int


ProgressCallback = Callable[[int, int, int], None]
Consolidator = Callable[[List[VersePairing]], List[VersePairing]]


# =============================================================================
# Request tokens
# =============================================================================

class RequestTracker:
    """Issues request tokens; issuing a new one supersedes all older ones."""

    def __init__(self):
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def issue(self) -> "RequestToken":
        with self._lock:
            self._generation += 1
            return RequestToken(self, self._generation)


class RequestToken:
    """Handle a run checks to know whether it is still the current request."""

    def __init__(self, tracker: Optional[RequestTracker] = None, generation: int = 0):
        self._tracker = tracker
        self._generation = generation
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def is_current(self) -> bool:
        if self._cancelled:
            return False
        if self._tracker is None:
            return True
        return self._tracker.generation == self._generation


# =============================================================================
# Pairing run
# =============================================================================

class PairingRun:
    """
    One prioritized pairing job over a fixed candidate list.

    Args:
        candidates: Term pairs, already sorted by priority.
        term_to_verses: Filter-applied verses per term.
        config: Limits and yield policy.
        is_between_groups: Tag stamped on every pairing.
        max_proximity: Proximity window (defaults to the config's).
        on_progress: ``(processed, total, pairings)`` callback fired at
            every yield and once at the end.
        token: Staleness guard checked before resuming.
        consolidator: Applied to the raw pairings when the run finishes.
        clock: Seconds-returning clock (injectable for tests).
    """

    def __init__(
        self,
        candidates: Sequence[TermPair],
        term_to_verses: Dict[str, Sequence[Verse]],
        config: VerselinkConfig | None = None,
        *,
        is_between_groups: bool = False,
        max_proximity: int | None = None,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[RequestToken] = None,
        consolidator: Optional[Consolidator] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._config = config or VerselinkConfig()
        self._candidates = list(candidates)
        self._term_to_verses = term_to_verses
        self._is_between_groups = is_between_groups
        self._max_proximity = (
            max_proximity if max_proximity is not None else self._config.max_proximity
        )
        self._on_progress = on_progress
        self._token = token
        self._consolidator = consolidator
        self._clock = clock

        self._raw: List[VersePairing] = []
        self._seen: Set[Tuple[str, str, str]] = set()
        self._started = False

        self.processed = 0
        self.truncated = False
        self.capped_term_pairs: List[str] = []
        self.cancelled = False
        self.finished = False
        self.result: Optional[PairingResult] = None

    # ── Accessors ─────────────────────────────────────────────────

    @property
    def total(self) -> int:
        return len(self._candidates)

    @property
    def raw_pairings(self) -> List[VersePairing]:
        return self._raw

    @property
    def progress(self) -> Progress:
        return Progress(self.processed, self.total, len(self._raw))

    # ── Execution ─────────────────────────────────────────────────

    def steps(self) -> Iterator[Progress]:
        """
        Process candidates, yielding :class:`Progress` between chunks.

        The generator returns when the work is done, a cap is hit, or the
        token is superseded; :attr:`result` is set in every case.
        """
        if self._started:
            raise RuntimeError("PairingRun.steps() can only be driven once")
        self._started = True

        budget = self._config.yield_budget_ms / 1000.0
        chunk = self._config.chunk_size

        if not self._still_current():
            self._finish()
            return

        last_yield = self._clock()
        for candidate in self._candidates:
            self._process(candidate)
            self.processed += 1
            if self.truncated:
                break
            if self.processed >= self.total:
                break

            if self.processed % chunk == 0 or self._clock() - last_yield >= budget:
                self._notify()
                logger.debug(
                    f"Pairing chunk done: {self.processed}/{self.total} term pairs, "
                    f"{len(self._raw):,} pairings"
                )
                yield self.progress
                if not self._still_current():
                    break
                last_yield = self._clock()

        self._finish()

    def run(self) -> PairingResult:
        """Drain :meth:`steps` synchronously."""
        for _ in self.steps():
            pass
        return self.result

    async def arun(self) -> PairingResult:
        """Drain :meth:`steps`, giving the event loop a turn at every yield."""
        for _ in self.steps():
            await asyncio.sleep(0)
        return self.result

    # ── Internals ─────────────────────────────────────────────────

    def _still_current(self) -> bool:
        if self._token is not None and not self._token.is_current():
            self.cancelled = True
            logger.debug(
                f"Pairing run superseded after {self.processed}/{self.total} term pairs"
            )
            return False
        return True

    def _notify(self) -> None:
        if self._on_progress is not None:
            self._on_progress(self.processed, self.total, len(self._raw))

    def _process(self, candidate: TermPair) -> None:
        cap = self._config.max_total_pairings
        per_pair = self._config.max_pairings_per_term_pair
        # One extra pairing tells a cut-short enumeration from an exact fit.
        found = find_pairings_for_terms(
            candidate.term1,
            candidate.term2,
            self._term_to_verses.get(candidate.term1, ()),
            self._term_to_verses.get(candidate.term2, ()),
            self._is_between_groups,
            max_proximity=self._max_proximity,
            max_pairings=per_pair + 1,
        )
        if len(found) > per_pair:
            found = found[:per_pair]
            label = make_label(candidate.term1, candidate.term2)
            self.capped_term_pairs.append(label)
            logger.warning(
                f"Term pair '{label}' reached the limit of {per_pair:,} pairings; "
                f"remaining pairings for it are skipped"
            )
        for pairing in found:
            dedup = (pairing.key, candidate.term1, candidate.term2)
            if dedup in self._seen:
                continue
            if len(self._raw) >= cap:
                self.truncated = True
                return
            self._seen.add(dedup)
            self._raw.append(pairing)

    def _finish(self) -> None:
        self.finished = True
        if self.cancelled:
            self.result = PairingResult(
                pairings=[],
                raw_count=len(self._raw),
                processed=self.processed,
                total=self.total,
                truncated=self.truncated,
                cancelled=True,
                capped_term_pairs=list(self.capped_term_pairs),
            )
            return

        self._notify()
        if self.truncated:
            logger.warning(
                f"Pairing limit of {self._config.max_total_pairings:,} reached after "
                f"{self.processed}/{self.total} term pairs; returning partial results"
            )

        pairings = self._consolidator(self._raw) if self._consolidator else list(self._raw)
        logger.info(
            f"Completed {self.processed}/{self.total} term pairs: "
            f"{len(self._raw):,} pairings, {len(pairings):,} after consolidation"
        )
        self.result = PairingResult(
            pairings=pairings,
            raw_count=len(self._raw),
            processed=self.processed,
            total=self.total,
            truncated=self.truncated,
            capped_term_pairs=list(self.capped_term_pairs),
        )
