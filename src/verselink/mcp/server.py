"""
Verselink MCP Server

Exposes verse search and co-occurrence pairing as tools that AI agents
can invoke natively via the Model Context Protocol.

Start with::

    verselink mcp                     # stdio transport
    verselink mcp --transport sse     # SSE transport

Or programmatically::

    from verselink.mcp.server import create_server
    server = create_server()
    server.run()
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

# FastMCP validates tool arguments with pydantic
from pydantic import Field  # type: ignore[import-untyped]

from verselink.client import Verselink
from verselink.core.config import VerselinkConfig
from verselink.core.consolidate import sort_pairings
from verselink.core.formatter import ResultFormatter
from verselink.core.search import SearchFilters

logger = logging.getLogger(__name__)


def create_server(config: VerselinkConfig | None = None, client: Verselink | None = None):
    """
    Build and return a configured FastMCP server instance.

    All tool invocations share one :class:`Verselink` client, so the corpus
    is parsed and indexed once, on first use.

    Args:
        config: Instance-based configuration.  Defaults to
            ``VerselinkConfig.from_env()`` so the server respects the same
            environment variables as the CLI.
        client: Pre-loaded client to serve (mainly for tests).

    Raises ``ImportError`` if ``fastmcp`` is not installed (install via
    ``pip install 'verselink[mcp]'``).
    """
    from fastmcp import FastMCP  # type: ignore[import-untyped]

    cfg = config or VerselinkConfig.from_env()
    shared = client or Verselink(config=cfg)

    mcp = FastMCP("Verselink")

    # ==================================================================
    # Helpers
    # ==================================================================

    def _client() -> Verselink:
        """Load the configured corpus on first use."""
        if not shared.is_loaded:
            shared.load()
        return shared

    def _norm_str_list(v: Any) -> list[str]:
        """Accept a list or a whitespace-separated string of terms."""
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        if isinstance(v, (list, tuple)):
            return [str(x).strip() for x in v if str(x).strip()]
        return []

    def _filters(testament: str | None, books: Any, max_proximity: int | None = None) -> SearchFilters:
        book_list = _norm_str_list(books) if not isinstance(books, str) else [books]
        return SearchFilters(
            testament=testament or None,
            books=frozenset(book_list) if book_list else None,
            max_proximity=max_proximity,
        )

    # ==================================================================
    # Tool: search_verses
    # ==================================================================

    @mcp.tool()
    def search_verses(
        terms: Annotated[
            list[str] | str,
            Field(description="Search terms. Each term matches words that start with it, case-insensitively ('love' matches 'loved' and 'lovingkindness'). A whitespace-separated string is also accepted.")
        ],
        testament: Annotated[
            str | None,
            Field(default=None, description="Restrict to 'old' or 'new' testament.")
        ] = None,
        books: Annotated[
            list[str] | None,
            Field(default=None, description="Restrict to these book names (e.g. ['John', 'Romans']). Combined with testament.")
        ] = None,
        max_results: Annotated[
            int | None,
            Field(default=None, description="Maximum number of verses to return. If None, all matches are returned in canonical order.")
        ] = None,
    ) -> str:
        """Find verses containing any of the given terms.

        Returns:
            JSON array of verses (reference, text, position) with the
            matched spans per verse.
        """
        try:
            term_list = _norm_str_list(terms)
            if not term_list:
                return json.dumps({"error": "Missing required argument: terms", "results": []})
            results = _client().search(term_list, _filters(testament, books))
            if max_results is not None:
                results = results[:max_results]
            return ResultFormatter.format_json(results)
        except Exception as e:
            return json.dumps({"error": str(e), "results": []}, allow_nan=False)

    # ==================================================================
    # Tool: find_pairings
    # ==================================================================

    @mcp.tool()
    def find_pairings(
        terms: Annotated[
            list[str] | str,
            Field(description="Terms to pair with each other. With group2 set, this is the first group.")
        ],
        group2: Annotated[
            list[str] | str | None,
            Field(default=None, description="Optional second term group. When set, only pairings with one term from each group are returned.")
        ] = None,
        testament: Annotated[
            str | None,
            Field(default=None, description="Restrict to 'old' or 'new' testament.")
        ] = None,
        books: Annotated[
            list[str] | None,
            Field(default=None, description="Restrict to these book names.")
        ] = None,
        max_proximity: Annotated[
            int | None,
            Field(default=None, description="Maximum distance in verses between the two verses of a pairing. 0 keeps same-verse pairings only.")
        ] = None,
    ) -> str:
        """Find verses where two different terms occur together or nearby.

        Returns:
            JSON object with ``pairings`` (sorted by proximity, each with
            verses and ``all_term_pairs`` labels) and run statistics
            (``raw_count``, ``processed``, ``total``, ``truncated``,
            ``capped_term_pairs``).
        """
        try:
            term_list = _norm_str_list(terms)
            if not term_list:
                return json.dumps({"error": "Missing required argument: terms", "pairings": []})
            filters = _filters(testament, books, max_proximity)
            second = _norm_str_list(group2)
            if second:
                result = _client().between_groups_pairings(term_list, second, filters)
            else:
                result = _client().pairings(term_list, filters)
            result.pairings = sort_pairings(result.pairings)
            return ResultFormatter.format_pairings_json(result)
        except Exception as e:
            return json.dumps({"error": str(e), "pairings": []}, allow_nan=False)

    # ==================================================================
    # Tool: get_corpus_stats
    # ==================================================================

    @mcp.tool()
    def get_corpus_stats() -> str:
        """Return verse, book and indexed-word counts of the loaded corpus."""
        try:
            return json.dumps(_client().stats())
        except Exception as e:
            return json.dumps({"error": str(e)}, allow_nan=False)

    # ==================================================================
    # Tool: health (readiness check)
    # ==================================================================

    @mcp.tool()
    def health() -> str:
        """Check that the Verselink MCP server is running and responsive.

        Returns:
            JSON with status, version and corpus load state.
        """
        return json.dumps({"status": "ok", **shared.health()})

    return mcp
