"""
Verselink Pairing Primitives

Data model and building blocks for co-occurrence pairing:

- :class:`VersePairing` — one verse (both terms in it) or two verses within
  the proximity window (one term in each)
- :func:`find_pairings_for_terms` — bounded enumeration for a single term pair
- :func:`build_within_group_candidates` / :func:`build_between_groups_candidates`
  — the prioritized term-pair work list consumed by the scheduler
"""

from bisect import bisect_left, bisect_right
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from verselink.core.corpus import Verse
from verselink.core.terms import DEFAULT_EQUIVALENCE, WordEquivalence

LABEL_SEPARATOR = " ↔ "


# =============================================================================
# Data Models
# =============================================================================

@dataclass(frozen=True)
class VersePairing:
    """Two terms co-occurring in one verse or in two nearby verses."""
    verses: Tuple[Verse, ...]
    """One or two verses, sorted by position."""
    term1: str
    term2: str
    proximity: int
    """0 for a single verse, otherwise the position distance."""
    is_between_groups: bool = False
    all_term_pairs: Optional[Tuple[str, ...]] = None
    """Consolidated ``"a ↔ b"`` labels sharing this exact verse set."""

    def __post_init__(self):
        if len(self.verses) not in (1, 2):
            raise ValueError(f"A pairing holds 1 or 2 verses, got {len(self.verses)}")
        if (self.proximity == 0) != (len(self.verses) == 1):
            raise ValueError(
                f"proximity {self.proximity} inconsistent with {len(self.verses)} verse(s)"
            )

    @property
    def key(self) -> str:
        return pairing_key(self.verses)

    @property
    def positions(self) -> Tuple[int, ...]:
        return tuple(v.position for v in self.verses)

    @property
    def label(self) -> str:
        return f"{self.term1}{LABEL_SEPARATOR}{self.term2}"

    @property
    def labels(self) -> List[str]:
        """Consolidated labels, or this pairing's own label."""
        return list(self.all_term_pairs) if self.all_term_pairs else [self.label]

    def to_dict(self) -> dict:
        return {
            "verses": [v.to_dict() for v in self.verses],
            "term1": self.term1,
            "term2": self.term2,
            "proximity": self.proximity,
            "is_between_groups": self.is_between_groups,
            "all_term_pairs": list(self.all_term_pairs) if self.all_term_pairs is not None else None,
        }


@dataclass(frozen=True)
class TermPair:
    """A candidate term pair with its scheduling priority."""
    term1: str
    term2: str
    priority: int


@dataclass
class PairingResult:
    """Outcome of one pairing run."""
    pairings: List[VersePairing]
    raw_count: int = 0
    """Pairings found before consolidation."""
    processed: int = 0
    """Term pairs processed (the truncation point when capped)."""
    total: int = 0
    """Candidate term pairs."""
    truncated: bool = False
    """The global pairing limit stopped the run early."""
    cancelled: bool = False
    capped_term_pairs: List[str] = field(default_factory=list)
    """Labels of term pairs cut short by the per-term-pair limit."""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["pairings"] = [p.to_dict() for p in self.pairings]
        return data


# =============================================================================
# Keys and labels
# =============================================================================

def pairing_key(verses: Sequence[Verse]) -> str:
    """Identity of a pairing's verse set, independent of the terms."""
    positions = [v.position for v in verses]
    if len(set(positions)) == 1:
        return f"same-{positions[0]}"
    return f"pair-{min(positions)}-{max(positions)}"


def make_label(term1: str, term2: str) -> str:
    """Alphabetically ordered ``"a ↔ b"`` label."""
    first, second = sorted((term1, term2))
    return f"{first}{LABEL_SEPARATOR}{second}"


# =============================================================================
# Single term pair
# =============================================================================

def find_pairings_for_terms(
    term1: str,
    term2: str,
    verses1: Sequence[Verse],
    verses2: Sequence[Verse],
    is_between_groups: bool = False,
    *,
    max_proximity: int = 100,
    max_pairings: int = 5000,
) -> List[VersePairing]:
    """
    Enumerate pairings of *term1* (in *verses1*) with *term2* (in *verses2*).

    Same-verse pairings come first (in ``verses1`` order), then proximity
    pairings in verse1-major, verse2-minor order, so a result cut short by
    *max_pairings* is always the same prefix.
    """
    pairings: List[VersePairing] = []
    if max_pairings <= 0:
        return pairings

    positions2 = {v.position for v in verses2}
    seen_same: Set[int] = set()
    for verse in verses1:
        if verse.position in positions2 and verse.position not in seen_same:
            seen_same.add(verse.position)
            pairings.append(VersePairing(
                verses=(verse,),
                term1=term1,
                term2=term2,
                proximity=0,
                is_between_groups=is_between_groups,
            ))
            if len(pairings) >= max_pairings:
                return pairings

    ordered2 = sorted(verses2, key=lambda v: v.position)
    keys2 = [v.position for v in ordered2]
    seen_pairs: Set[Tuple[int, int]] = set()
    for verse1 in verses1:
        lo = bisect_left(keys2, verse1.position - max_proximity)
        hi = bisect_right(keys2, verse1.position + max_proximity)
        for verse2 in ordered2[lo:hi]:
            if verse2.position == verse1.position:
                continue
            pair = (min(verse1.position, verse2.position), max(verse1.position, verse2.position))
            if pair in seen_pairs:
                continue
            seen_pairs.add(pair)
            first, second = sorted((verse1, verse2), key=lambda v: v.position)
            pairings.append(VersePairing(
                verses=(first, second),
                term1=term1,
                term2=term2,
                proximity=pair[1] - pair[0],
                is_between_groups=is_between_groups,
            ))
            if len(pairings) >= max_pairings:
                return pairings

    return pairings


# =============================================================================
# Candidate term pairs
# =============================================================================

def term_priority(count1: int, count2: int) -> int:
    """
    Favor pairs whose terms are both reasonably frequent and similarly
    frequent; rare terms and wildly mismatched counts sink.
    """
    return min(count1, count2) * max(1, 100 - abs(count1 - count2))


def _prioritize(
    pairs: Iterable[Tuple[str, str]],
    term_to_verses: Dict[str, Sequence[Verse]],
) -> List[TermPair]:
    candidates = [
        TermPair(
            term1=t1,
            term2=t2,
            priority=term_priority(
                len(term_to_verses.get(t1, ())), len(term_to_verses.get(t2, ())),
            ),
        )
        for t1, t2 in pairs
    ]
    # Stable: equal priorities keep enumeration order
    candidates.sort(key=lambda c: c.priority, reverse=True)
    return candidates


def build_within_group_candidates(
    terms: Sequence[str],
    term_to_verses: Dict[str, Sequence[Verse]],
    equivalence: WordEquivalence = DEFAULT_EQUIVALENCE,
) -> List[TermPair]:
    """All unordered pairs of distinct, non-equivalent terms, by priority."""
    unique = list(dict.fromkeys(terms))
    pairs = [
        (unique[i], unique[j])
        for i in range(len(unique))
        for j in range(i + 1, len(unique))
        if not equivalence.same_word(unique[i], unique[j])
    ]
    return _prioritize(pairs, term_to_verses)


def build_between_groups_candidates(
    group1: Sequence[str],
    group2: Sequence[str],
    term_to_verses: Dict[str, Sequence[Verse]],
    equivalence: WordEquivalence = DEFAULT_EQUIVALENCE,
) -> List[TermPair]:
    """Every (group1, group2) pair of non-equivalent terms, by priority."""
    pairs: List[Tuple[str, str]] = []
    seen: Set[frozenset] = set()
    for t1 in group1:
        for t2 in group2:
            if equivalence.same_word(t1, t2):
                continue
            unordered = frozenset((t1, t2))
            if unordered in seen:
                continue
            seen.add(unordered)
            pairs.append((t1, t2))
    return _prioritize(pairs, term_to_verses)
