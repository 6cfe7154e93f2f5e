"""
Verselink Corpus Loader

Parses the line-oriented verse text (``"<Book> <chapter>:<verse> <text>"``)
into immutable :class:`Verse` records.  Each verse receives a dense,
zero-based ``position`` in parse order; every downstream component sorts,
measures proximity and deduplicates by that position only.

Parsing is best-effort: lines that do not have the verse shape are dropped
without failing the load.  Only an unreadable source is an error.
"""

import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Tuple, Union

from verselink.core.config import Canon, VerselinkConfig
from verselink.exceptions import CorpusUnavailableError

logger = logging.getLogger(__name__)

_VERSE_LINE = re.compile(r"^(.+?)\s+(\d+):(\d+)\s+(.+)$")


# =============================================================================
# Data Model
# =============================================================================

@dataclass(frozen=True)
class Verse:
    """One verse, the corpus's atomic unit."""
    book: str
    chapter: int
    number: int
    text: str
    reference: str
    """Display reference, e.g. ``'Genesis 1:1'``."""
    position: int
    """Zero-based index in parse order (canonical total order)."""

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# Parsing
# =============================================================================

def _is_header(line: str, config: VerselinkConfig) -> bool:
    if any(line.startswith(prefix) for prefix in config.header_prefixes):
        return True
    return any(marker in line for marker in config.header_markers)


def parse_corpus(text: str, config: VerselinkConfig | None = None) -> List[Verse]:
    """
    Parse raw corpus text into an ordered list of verses.

    Blank lines and header/footer lines are skipped; lines that do not
    match the verse shape are dropped silently.
    """
    cfg = config or VerselinkConfig()
    verses: List[Verse] = []
    dropped = 0

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or _is_header(stripped, cfg):
            continue

        match = _VERSE_LINE.match(stripped)
        if not match:
            dropped += 1
            logger.debug(f"Dropping malformed corpus line: {stripped[:60]!r}")
            continue

        book, chapter, number, verse_text = match.groups()
        book = book.strip()
        verses.append(Verse(
            book=book,
            chapter=int(chapter),
            number=int(number),
            text=verse_text.strip(),
            reference=f"{book} {int(chapter)}:{int(number)}",
            position=len(verses),
        ))

    if dropped:
        logger.debug(f"Dropped {dropped} malformed line(s) while parsing corpus")
    return verses


def load_corpus(source: Union[str, Path], config: VerselinkConfig | None = None) -> List[Verse]:
    """
    Read and parse the corpus file at *source*.

    Raises:
        CorpusUnavailableError: The file cannot be read or decoded, or it
            contains no verse lines at all.
    """
    path = Path(source)
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusUnavailableError(f"Cannot read corpus at {path}: {exc}") from exc

    verses = parse_corpus(raw, config)
    if not verses:
        raise CorpusUnavailableError(f"No verse lines found in corpus at {path}.")

    logger.info(f"Loaded {len(verses):,} verses from {path}")
    return verses


# =============================================================================
# Canonical ordering
# =============================================================================

def canonical_sort_key(verse: Verse) -> Tuple[int, int, int]:
    """Sort key by canonical book order, then chapter, then verse number."""
    return (Canon.book_order(verse.book), verse.chapter, verse.number)


def compare_canonical(a: Verse, b: Verse) -> int:
    """Three-way comparison of two verses in canonical book order."""
    key_a, key_b = canonical_sort_key(a), canonical_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def books_in_corpus(verses: List[Verse]) -> List[str]:
    """Distinct book names in first-appearance order."""
    seen: dict = {}
    for verse in verses:
        seen.setdefault(verse.book, None)
    return list(seen)
