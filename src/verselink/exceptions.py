"""
Verselink Exception Hierarchy

Structured exceptions for clear error handling across the library, CLI and
MCP consumers.  Each exception type maps to a specific failure mode so that
callers can tell "not ready" apart from "ready, nothing matched" without
parsing message strings.

Usage::

    from verselink.exceptions import VerselinkError, IndexNotReadyError

    try:
        results = client.search(["faith"])
    except IndexNotReadyError:
        print("Call client.load() first.")
    except VerselinkError as exc:
        print(f"Verselink error: {exc}")
"""


class VerselinkError(Exception):
    """Base exception for all Verselink errors."""


class ConfigError(VerselinkError, ValueError):
    """Configuration is invalid (e.g. a non-positive size limit).

    Inherits from ``ValueError`` so code that already catches
    ``ValueError`` from ``validate()`` keeps working.
    """


class CorpusUnavailableError(VerselinkError):
    """The corpus source could not be read, or held no verse lines.

    Fatal for that load attempt; never retried automatically.
    """


class IndexNotReadyError(VerselinkError, RuntimeError):
    """Search or pairing was requested before a corpus was loaded."""


class FilterError(VerselinkError, ValueError):
    """A search filter holds an unsupported value (e.g. unknown testament)."""
