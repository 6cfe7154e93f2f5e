"""
Verselink Inverted Index

``word → verses`` index built once per corpus load.  It is a coarse
accelerator only: prefix lookups over the sorted vocabulary narrow the
candidate verses, and every candidate is then confirmed with the shared
matcher so indexed and scanned results can never diverge.
"""

import logging
import time
from bisect import bisect_left
from typing import Dict, Iterable, List, Optional, Sequence

from verselink.core.corpus import Verse
from verselink.core.matcher import index_words, is_plain_word, test_match

logger = logging.getLogger(__name__)


class VerseIndex:
    """
    Read-only view over a parsed corpus plus its inverted word index.

    Instances are caller-owned: build one per loaded corpus and pass it to
    the search engine and pairing generator.
    """

    def __init__(self, verses: Sequence[Verse]):
        self._verses: List[Verse] = list(verses)
        self._by_position: Dict[int, Verse] = {v.position: v for v in self._verses}
        self._word_index: Dict[str, List[Verse]] = {}
        self._vocabulary: List[str] = []
        self.build_seconds: float = 0.0
        self._build()

    # ── Construction ──────────────────────────────────────────────

    def _build(self) -> None:
        t0 = time.perf_counter()
        for verse in self._verses:
            for word in index_words(verse.text):
                self._word_index.setdefault(word, []).append(verse)
        self._vocabulary = sorted(self._word_index)
        self.build_seconds = time.perf_counter() - t0
        logger.info(
            f"Indexed {len(self._verses):,} verses, "
            f"{len(self._vocabulary):,} distinct words in {self.build_seconds:.3f}s"
        )

    # ── Accessors ─────────────────────────────────────────────────

    @property
    def verses(self) -> List[Verse]:
        return self._verses

    def __len__(self) -> int:
        return len(self._verses)

    @property
    def word_count(self) -> int:
        return len(self._vocabulary)

    def verses_for_word(self, word: str) -> List[Verse]:
        """Exact lookup of an indexed (lowercased, punctuation-stripped) word."""
        return list(self._word_index.get(word.lower(), []))

    def words_with_prefix(self, prefix: str) -> List[str]:
        """Indexed words starting with *prefix*, in sorted order."""
        prefix = prefix.lower()
        start = bisect_left(self._vocabulary, prefix)
        words: List[str] = []
        for word in self._vocabulary[start:]:
            if not word.startswith(prefix):
                break
            words.append(word)
        return words

    # ── Matching ──────────────────────────────────────────────────

    def candidates(self, term: str) -> List[Verse]:
        """
        Verses where *term* matches, in position order.

        Plain-word terms go through the prefix index; terms containing
        punctuation fall back to a full scan.
        """
        term = term.strip().lower()
        if not term:
            return []
        if not is_plain_word(term):
            return [v for v in self._verses if test_match(v.text, term)]

        positions = set()
        for word in self.words_with_prefix(term):
            positions.update(v.position for v in self._word_index[word])
        return [
            self._by_position[pos]
            for pos in sorted(positions)
            if test_match(self._by_position[pos].text, term)
        ]

    def candidate_positions(self, terms: Iterable[str]) -> List[int]:
        """Sorted union of candidate positions for several terms."""
        positions = set()
        for term in terms:
            positions.update(v.position for v in self.candidates(term))
        return sorted(positions)

    def verse_at(self, position: int) -> Optional[Verse]:
        return self._by_position.get(position)
