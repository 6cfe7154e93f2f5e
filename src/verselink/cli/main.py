"""
Verselink CLI

Command-line interface for verse search and co-occurrence pairing.

Usage::

    verselink search faith hope --corpus kjv.txt      # Verses containing any term
    verselink pairings faith hope charity             # Pairings within one term set
    verselink pairings light --with darkness          # Pairings between two groups
    verselink counts faith                            # Per-testament / per-book counts
    verselink stats                                   # Corpus statistics
    verselink mcp                                     # Start the MCP server
"""

import logging
import time
from typing import Optional, Tuple

import click
from tqdm import tqdm

from verselink.client import Verselink
from verselink.core.config import Canon, VerselinkConfig
from verselink.core.consolidate import sort_pairings
from verselink.core.formatter import ResultFormatter
from verselink.core.search import SearchFilters
from verselink.exceptions import VerselinkError


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

def _configure_logging(config: VerselinkConfig, verbose: bool) -> None:
    """Set up logging for the CLI session."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(level=level, format=config.log_format)


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

_corpus_option = click.option(
    "--corpus", "corpus", type=click.Path(dir_okay=False), default=None,
    envvar="VERSELINK_CORPUS_PATH",
    help="Corpus text file (default: $VERSELINK_CORPUS_PATH).",
)
_testament_option = click.option(
    "--testament", type=click.Choice(list(Canon.TESTAMENTS)), default=None,
    help="Restrict to one testament.",
)
_book_option = click.option(
    "--book", "books", multiple=True,
    help="Restrict to a book (repeatable; combined with --testament).",
)
_format_option = click.option(
    "-f", "--format", "fmt", type=click.Choice(["console", "json", "compact"]),
    default="console", help="Output format.",
)
_verbose_option = click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="verselink")
@click.pass_context
def cli(ctx: click.Context):
    """Verselink — verse search and word co-occurrence pairing."""
    ctx.ensure_object(dict)


# ---------------------------------------------------------------------------
# verselink search
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("terms", nargs=-1, required=True)
@_corpus_option
@_testament_option
@_book_option
@_format_option
@click.option("-n", "--max-results", type=click.IntRange(min=0), default=None,
              help="Maximum number of verses to print.")
@_verbose_option
def search(terms: Tuple[str, ...], corpus: Optional[str], testament: Optional[str],
           books: Tuple[str, ...], fmt: str, max_results: Optional[int], verbose: bool):
    """Find verses containing any of TERMS (word-prefix match)."""
    client = _load_client(corpus, verbose)
    t0 = time.perf_counter()
    results = _run(lambda: client.search(list(terms), _filters(testament, books)))
    elapsed = time.perf_counter() - t0
    if max_results is not None:
        results = results[:max_results]

    formatter = ResultFormatter()
    if fmt == "json":
        click.echo(formatter.format_json(results))
    elif fmt == "compact":
        click.echo(formatter.format_compact(results))
    else:
        click.echo(formatter.format_console(results, elapsed_time=elapsed))


# ---------------------------------------------------------------------------
# verselink pairings
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("terms", nargs=-1, required=True)
@click.option("--with", "with_terms", multiple=True,
              help="Second term group (repeatable); pairs TERMS against it.")
@_corpus_option
@_testament_option
@_book_option
@click.option("--max-proximity", type=click.IntRange(min=0), default=None,
              help="Maximum verse distance for two-verse pairings.")
@_format_option
@click.option("--no-progress", is_flag=True, help="Hide the progress bar.")
@_verbose_option
def pairings(terms: Tuple[str, ...], with_terms: Tuple[str, ...], corpus: Optional[str],
             testament: Optional[str], books: Tuple[str, ...], max_proximity: Optional[int],
             fmt: str, no_progress: bool, verbose: bool):
    """Find verses where two different TERMS occur together or nearby."""
    client = _load_client(corpus, verbose)
    filters = _filters(testament, books, max_proximity)
    t0 = time.perf_counter()

    with tqdm(total=0, desc="Pairing terms", unit="pair",
              disable=no_progress or fmt != "console", leave=False) as pbar:

        def on_progress(processed: int, total: int, found: int) -> None:
            pbar.total = total
            pbar.n = processed
            pbar.set_postfix(pairings=found)
            pbar.refresh()

        if with_terms:
            result = _run(lambda: client.between_groups_pairings(
                list(terms), list(with_terms), filters, on_progress=on_progress,
            ))
        else:
            result = _run(lambda: client.pairings(list(terms), filters, on_progress=on_progress))

    result.pairings = sort_pairings(result.pairings)
    elapsed = time.perf_counter() - t0

    formatter = ResultFormatter()
    if fmt == "json":
        click.echo(formatter.format_pairings_json(result))
    elif fmt == "compact":
        click.echo(formatter.format_pairings_compact(result))
    else:
        click.echo(formatter.format_pairings_console(result, elapsed_time=elapsed))


# ---------------------------------------------------------------------------
# verselink counts
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("terms", nargs=-1, required=True)
@_corpus_option
@click.option("--all-books", is_flag=True, help="Also list books with no results.")
@_verbose_option
def counts(terms: Tuple[str, ...], corpus: Optional[str], all_books: bool, verbose: bool):
    """Count verses matching TERMS overall, per testament and per book."""
    client = _load_client(corpus, verbose)
    result = _run(lambda: client.filter_counts(list(terms)))
    click.echo(ResultFormatter.format_counts(result, show_empty=all_books))


# ---------------------------------------------------------------------------
# verselink stats
# ---------------------------------------------------------------------------

@cli.command()
@_corpus_option
@_verbose_option
def stats(corpus: Optional[str], verbose: bool):
    """Show corpus statistics."""
    client = _load_client(corpus, verbose)
    click.echo(ResultFormatter.format_stats(client.stats(), source=client.health()["source"]))


# ---------------------------------------------------------------------------
# verselink mcp
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--transport", type=click.Choice(["stdio", "sse"]),
              default="stdio", help="MCP transport (default: stdio).")
@_verbose_option
def mcp(transport: str, verbose: bool):
    """Start the Verselink MCP server for agent integration."""
    config = VerselinkConfig.from_env()
    _configure_logging(config, verbose)
    try:
        from verselink.mcp.server import create_server  # noqa: E402
    except ImportError:
        click.echo(
            "Error: MCP dependencies not installed.\n"
            "Install with:  pip install 'verselink[mcp]'",
            err=True,
        )
        raise SystemExit(1)

    server = create_server(config)
    server.run(transport=transport)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_client(corpus: Optional[str], verbose: bool) -> Verselink:
    """Build a client from the environment and load the corpus."""
    config = VerselinkConfig.from_env()
    _configure_logging(config, verbose)
    client = Verselink(config=config)
    _run(lambda: client.load(corpus))
    return client


def _filters(testament: Optional[str], books: Tuple[str, ...],
             max_proximity: Optional[int] = None) -> SearchFilters:
    return _run(lambda: SearchFilters(
        testament=testament,
        books=frozenset(books) if books else None,
        max_proximity=max_proximity,
    ))


def _run(action):
    """Run *action*, turning library errors into a clean CLI exit."""
    try:
        return action()
    except VerselinkError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
