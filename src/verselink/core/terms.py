"""
Verselink Term Normalizer

Canonicalizes and validates user-entered search terms and decides when two
terms are the same underlying word.

Word equivalence is intentionally loose: two terms are equivalent when
their stems match after stripping one suffix from a small fixed table and
applying a short irregular-rewrite table, OR when one normalized form
contains the other.  It is used only to keep morphological variants
(``love`` / ``loving``) from being paired with each other.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 2

_NON_WORD = re.compile(r"[^\w]")


def normalize(term: str) -> str:
    """Lowercase and trim a raw term."""
    return term.strip().lower()


def normalize_word(term: str) -> str:
    """Normalize and strip every non-word character (``"Lord's"`` → ``"lords"``)."""
    return _NON_WORD.sub("", normalize(term))


def is_valid(term: str, min_length: int = MIN_TERM_LENGTH) -> bool:
    """True when the normalized term is long enough to search for."""
    return len(normalize(term)) >= min_length


def split_search_string(search_string: str) -> List[str]:
    """Split raw user input into whitespace-separated terms."""
    return [part for part in search_string.split() if part]


def limit_and_validate(
    terms: Iterable[str],
    max_count: int,
    min_length: int = MIN_TERM_LENGTH,
) -> List[str]:
    """
    Normalize *terms*, drop invalid and repeated ones, and keep at most
    *max_count* of them in their original order.

    Truncation is not an error: it is logged at WARNING level and the
    first *max_count* valid terms are returned.
    """
    valid: List[str] = []
    seen = set()
    for raw in terms:
        term = normalize(raw)
        if len(term) < min_length or term in seen:
            continue
        seen.add(term)
        valid.append(term)

    if len(valid) > max_count:
        logger.warning(
            f"Search limited to {max_count} terms; ignoring {valid[max_count:]}"
        )
        valid = valid[:max_count]
    return valid


def process_search_string(
    search_string: str,
    max_count: int,
    min_length: int = MIN_TERM_LENGTH,
) -> List[str]:
    """Split, normalize and limit a raw search string in one step."""
    return limit_and_validate(split_search_string(search_string), max_count, min_length)


# =============================================================================
# Word equivalence
# =============================================================================

@dataclass(frozen=True)
class WordEquivalence:
    """
    Morphological equivalence policy.

    Pass a customised instance (or a subclass overriding :meth:`stem`) to
    the engine to extend or replace the default tables.
    """

    suffixes: Tuple[str, ...] = ("ful", "ly", "ing", "ed", "er", "est", "s")
    irregular: Dict[str, str] = field(default_factory=lambda: {
        "faithf": "faith",
        "lov": "love",
        "runn": "run",
        "begun": "begin",
        "began": "begin",
    })
    min_stem_length: int = MIN_TERM_LENGTH

    def stem(self, word: str) -> str:
        """Strip the first matching suffix, then apply the irregular table."""
        stem = normalize_word(word)
        for suffix in self.suffixes:
            if stem.endswith(suffix) and len(stem) - len(suffix) >= self.min_stem_length:
                stem = stem[: -len(suffix)]
                break
        return self.irregular.get(stem, stem)

    def same_word(self, term1: str, term2: str) -> bool:
        """True when both terms look like forms of one underlying word."""
        word1 = normalize_word(term1)
        word2 = normalize_word(term2)
        if word1 in word2 or word2 in word1:
            return True
        return self.stem(word1) == self.stem(word2)


DEFAULT_EQUIVALENCE = WordEquivalence()


def same_word(term1: str, term2: str) -> bool:
    """:meth:`WordEquivalence.same_word` with the default tables."""
    return DEFAULT_EQUIVALENCE.same_word(term1, term2)
