"""
Verselink Result Formatting

Plain-text and JSON renderings of search results and pairings for the CLI
and the MCP server.
"""

import json
import shutil
from typing import Dict, List, Optional

from verselink.core.pairing import PairingResult, VersePairing
from verselink.core.search import FilterCounts, SearchResult


class ResultFormatter:
    """Format search results and pairings for different output modes."""

    # ── Helpers ───────────────────────────────────────────────────

    @staticmethod
    def _width() -> int:
        return min(shutil.get_terminal_size().columns, 78)

    @staticmethod
    def _header(title: str, count: int, noun: str, elapsed_time: float | None) -> List[str]:
        width = ResultFormatter._width()
        thin = "─" * width
        header = f"  {title} — {count} {noun}{'s' if count != 1 else ''}"
        if elapsed_time is not None:
            timing_str = f"{elapsed_time:.4f}".replace(',', '.')
            header += f" in {timing_str} seconds"
        return [f"\n{thin}", header, thin]

    @staticmethod
    def _sanitize_for_json(s: str) -> str:
        """Strip control characters that can break strict JSON parsers."""
        if not s:
            return s
        return "".join(c for c in s if (ord(c) >= 32 and ord(c) != 127) or c in "\n\r\t")

    # ── Search results ────────────────────────────────────────────

    @staticmethod
    def format_console(results: List[SearchResult], elapsed_time: float | None = None) -> str:
        """Reference, matched terms and verse text per result."""
        if not results:
            return "\n  No results found.\n"

        out = ResultFormatter._header("VERSELINK", len(results), "verse", elapsed_time)
        for idx, r in enumerate(results, start=1):
            out.append("")
            out.append(f"  #{idx}  {r.verse.reference}   [{', '.join(r.terms)}]")
            out.append(f"    {r.verse.text}")
        out.append("")
        return "\n".join(out)

    @staticmethod
    def format_compact(results: List[SearchResult]) -> str:
        """One line per verse: ``reference<TAB>text``."""
        if not results:
            return "No results found."
        return "\n".join(f"{r.verse.reference}\t{r.verse.text}" for r in results)

    @staticmethod
    def format_json(results: List[SearchResult]) -> str:
        objs = []
        for r in results:
            obj = r.to_dict()
            obj["verse"]["text"] = ResultFormatter._sanitize_for_json(r.verse.text)
            objs.append(obj)
        return json.dumps(objs, indent=2, ensure_ascii=False, allow_nan=False)

    # ── Pairings ──────────────────────────────────────────────────

    @staticmethod
    def _pairing_title(p: VersePairing) -> str:
        refs = " + ".join(v.reference for v in p.verses)
        distance = "same verse" if p.proximity == 0 else f"{p.proximity} apart"
        return f"{refs}  ({distance})"

    @staticmethod
    def format_pairings_console(result: PairingResult, elapsed_time: float | None = None) -> str:
        if not result.pairings:
            note = "  (cancelled)" if result.cancelled else ""
            return f"\n  No pairings found.{note}\n"

        out = ResultFormatter._header("VERSELINK", len(result.pairings), "pairing", elapsed_time)
        for idx, p in enumerate(result.pairings, start=1):
            out.append("")
            out.append(f"  #{idx}  {ResultFormatter._pairing_title(p)}")
            out.append(f"    Terms : {'; '.join(p.labels)}")
            for verse in p.verses:
                out.append(f"    {verse.reference}: {verse.text}")
        if result.truncated:
            out.append("")
            out.append(
                f"  Partial results: pairing limit reached after "
                f"{result.processed}/{result.total} term pairs."
            )
        if result.capped_term_pairs:
            out.append("")
            out.append(
                f"  Per-pair limit reached for: {', '.join(result.capped_term_pairs)}"
            )
        out.append("")
        return "\n".join(out)

    @staticmethod
    def format_pairings_compact(result: PairingResult) -> str:
        if not result.pairings:
            return "No pairings found."
        return "\n".join(
            f"{ResultFormatter._pairing_title(p)}\t{'; '.join(p.labels)}"
            for p in result.pairings
        )

    @staticmethod
    def format_pairings_json(result: PairingResult) -> str:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)

    # ── Counts & stats ────────────────────────────────────────────

    @staticmethod
    def format_counts(counts: FilterCounts, show_empty: bool = False) -> str:
        lines = [
            f"  Total          {counts.total:>8,}",
            f"  Old Testament  {counts.old_testament:>8,}",
            f"  New Testament  {counts.new_testament:>8,}",
        ]
        books: Dict[str, int] = {
            book: n for book, n in counts.books.items() if n or show_empty
        }
        if books:
            lines.append("")
            lines.extend(f"  {book:<16} {n:>7,}" for book, n in books.items())
        return "\n".join(lines)

    @staticmethod
    def format_stats(stats: Dict[str, object], source: Optional[str] = None) -> str:
        out = ["─" * 50, "  VERSELINK — Corpus Statistics", "─" * 50]
        if source:
            out.append(f"  Corpus : {source}")
            out.append("")
        out.append(f"  Verses          {stats['verses']:>10,}")
        out.append(f"  Books           {stats['books']:>10,}")
        out.append(f"  Indexed words   {stats['words']:>10,}")
        out.append("─" * 50)
        return "\n".join(out)
