"""
Verselink Consolidator

Merges pairings that resolve to the same verse set into one pairing whose
``all_term_pairs`` lists every term pair behind it, so N term-pair hits on
the same verses become a single graph edge with N labels.
"""

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Set

from verselink.core.corpus import Verse
from verselink.core.pairing import VersePairing, make_label
from verselink.core.terms import DEFAULT_EQUIVALENCE, WordEquivalence

logger = logging.getLogger(__name__)


def _group_by_key(pairings: Iterable[VersePairing]) -> Dict[str, List[VersePairing]]:
    groups: Dict[str, List[VersePairing]] = {}
    for pairing in pairings:
        groups.setdefault(pairing.key, []).append(pairing)
    return groups


def _recovered_terms(
    positions: Set[int],
    term_positions: Dict[str, Set[int]],
    known: Set[str],
) -> List[str]:
    """Other search terms matching every verse of the group."""
    return [
        term for term, hits in term_positions.items()
        if term not in known and positions <= hits
    ]


def _labels(
    terms: Sequence[str],
    group1: Optional[Set[str]],
    group2: Optional[Set[str]],
    equivalence: WordEquivalence,
    suppress_equivalent: bool,
) -> List[str]:
    labels: Set[str] = set()
    between = group1 is not None and group2 is not None
    for a, b in combinations(sorted(set(terms)), 2):
        if between:
            cross = (a in group1 and b in group2) or (a in group2 and b in group1)
            if not cross:
                continue
        if suppress_equivalent and equivalence.same_word(a, b):
            continue
        labels.add(make_label(a, b))
    return sorted(labels)


def consolidate_pairings(
    pairings: Sequence[VersePairing],
    term_to_verses: Optional[Dict[str, Sequence[Verse]]] = None,
    *,
    group1: Optional[Iterable[str]] = None,
    group2: Optional[Iterable[str]] = None,
    equivalence: WordEquivalence = DEFAULT_EQUIVALENCE,
    suppress_equivalent_labels: bool = False,
) -> List[VersePairing]:
    """
    Group *pairings* by verse set and emit one pairing per group.

    Args:
        pairings: Raw pairings from the generator.
        term_to_verses: The map used for generation.  When given, terms
            that match every verse of a group are added to its term union
            even if they never formed an explicit pair.
        group1, group2: Both set → between-groups mode: only cross-group
            labels are produced.  Otherwise every unordered pair is labelled.
        equivalence: Word-equivalence policy for label suppression.
        suppress_equivalent_labels: Drop labels whose terms are
            morphological variants of each other.

    Returns:
        Consolidated pairings in first-seen group order.  Each inherits the
        first pairing's verses, terms, proximity and group flag.
    """
    g1 = set(group1) if group1 is not None else None
    g2 = set(group2) if group2 is not None else None
    term_positions: Dict[str, Set[int]] = {
        term: {v.position for v in verses}
        for term, verses in (term_to_verses or {}).items()
    }

    consolidated: List[VersePairing] = []
    groups = _group_by_key(pairings)
    for group in groups.values():
        first = group[0]
        union: List[str] = []
        for pairing in group:
            for term in (pairing.term1, pairing.term2):
                if term not in union:
                    union.append(term)
        union.extend(_recovered_terms(set(first.positions), term_positions, set(union)))

        labels = _labels(union, g1, g2, equivalence, suppress_equivalent_labels)
        if not labels:
            labels = [first.label]

        consolidated.append(VersePairing(
            verses=first.verses,
            term1=first.term1,
            term2=first.term2,
            proximity=first.proximity,
            is_between_groups=first.is_between_groups,
            all_term_pairs=tuple(labels),
        ))

    logger.debug(
        f"Consolidated {len(pairings)} pairings into {len(consolidated)} verse groups"
    )
    return consolidated


def sort_pairings(pairings: Iterable[VersePairing]) -> List[VersePairing]:
    """Same-verse pairings first, then by distance, then by first verse position."""
    return sorted(pairings, key=lambda p: (p.proximity, p.verses[0].position))
