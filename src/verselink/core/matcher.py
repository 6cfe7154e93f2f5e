"""
Verselink Matcher

The single word-matching rule shared by search, pairing candidate
selection and match-bound computation: a term matches when it appears at a
word boundary followed by zero or more word characters, i.e. as a prefix of
any word (``faith`` matches ``faithful`` but never ``unfaith``).
"""

import re
from functools import lru_cache
from typing import List, Pattern, Set, Tuple

_NON_WORD_OR_SPACE = re.compile(r"[^\w\s]")
_WORD_RUN = re.compile(r"\w+")


@lru_cache(maxsize=1024)
def word_boundary_pattern(term: str) -> Pattern[str]:
    """Compiled, case-insensitive ``\\b<term>\\w*`` pattern for a term."""
    escaped = re.escape(term.strip().lower())
    return re.compile(rf"\b{escaped}\w*", re.IGNORECASE)


def find_matches(text: str, term: str) -> List[Tuple[int, int]]:
    """Every non-overlapping ``(start, end)`` span of *term* in *text*, left to right."""
    return [m.span() for m in word_boundary_pattern(term).finditer(text)]


def test_match(text: str, term: str) -> bool:
    """Boolean short-circuit form of :func:`find_matches`."""
    return word_boundary_pattern(term).search(text) is not None


# Keep pytest from collecting the matcher as a test function.
test_match.__test__ = False


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation and split on whitespace."""
    return [word for word in _NON_WORD_OR_SPACE.sub("", text.lower()).split() if word]


def index_words(text: str) -> Set[str]:
    """
    Words under which a verse is indexed.

    Besides the punctuation-stripped tokens, every maximal run of word
    characters is recorded, so a prefix lookup finds any position where
    :func:`find_matches` could start (``fellow-servant`` → ``servant``).
    """
    words = set(tokenize(text))
    words.update(_WORD_RUN.findall(text.lower()))
    return words


def is_plain_word(term: str) -> bool:
    """True when *term* consists only of word characters."""
    return _WORD_RUN.fullmatch(term) is not None
