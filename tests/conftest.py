"""
Shared fixtures for the Verselink test suite.
"""

import sys
import warnings
from pathlib import Path

import pytest

# Filter deprecation warnings from pytest-asyncio; we cannot fix the library.
warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    module="pytest_asyncio",
)

# Ensure the src/ directory is on the import path so that
# verselink.core.corpus / verselink.core.search / etc. can be imported.
SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))

from verselink.core.config import VerselinkConfig  # noqa: E402
from verselink.core.corpus import parse_corpus  # noqa: E402
from verselink.core.index import VerseIndex  # noqa: E402
from verselink.core.search import VerseSearchEngine  # noqa: E402


# =============================================================================
# Fixtures — corpus text
# =============================================================================

GENESIS_TEXT = (
    "Genesis 1:1 In the beginning God created the heaven and the earth.\n"
    "Genesis 1:2 And the earth was without form, and void; and darkness was "
    "upon the face of the deep.\n"
)

SAMPLE_TEXT = (
    "KJV\n"
    "King James Bible Pure Cambridge Edition - BibleProtector.com\n"
    "\n"
    "Genesis 1:1 In the beginning God created the heaven and the earth.\n"
    "Genesis 1:2 And the earth was without form, and void; and darkness was upon the face of the deep.\n"
    "Genesis 1:3 And God said, Let there be light: and there was light.\n"
    "Genesis 1:4 And God saw the light, that it was good: and God divided the light from the darkness.\n"
    "this line is not a verse\n"
    "Psalms 23:1 The LORD is my shepherd; I shall not want.\n"
    "Proverbs 3:5 Trust in the LORD with all thine heart; and lean not unto thine own understanding.\n"
    "John 1:5 And the light shineth in darkness; and the darkness comprehended it not.\n"
    "Romans 5:5 And hope maketh not ashamed; because the love of God is shed abroad in our hearts.\n"
    "1 Corinthians 13:13 And now abideth faith, hope, charity, these three; but the greatest of these is charity.\n"
    "Hebrews 11:1 Now faith is the substance of things hoped for, the evidence of things not seen.\n"
    "1 John 4:8 He that loveth not knoweth not God; for God is love.\n"
)


@pytest.fixture
def genesis_text() -> str:
    """The two-verse Genesis corpus."""
    return GENESIS_TEXT


@pytest.fixture
def sample_text() -> str:
    """A small multi-book corpus with header, blank and malformed lines."""
    return SAMPLE_TEXT


@pytest.fixture
def config() -> VerselinkConfig:
    """Config with library defaults (no environment lookups)."""
    return VerselinkConfig()


@pytest.fixture
def genesis_verses(genesis_text, config):
    return parse_corpus(genesis_text, config)


@pytest.fixture
def sample_verses(sample_text, config):
    return parse_corpus(sample_text, config)


@pytest.fixture
def genesis_engine(genesis_verses, config) -> VerseSearchEngine:
    return VerseSearchEngine(VerseIndex(genesis_verses), config)


@pytest.fixture
def sample_engine(sample_verses, config) -> VerseSearchEngine:
    return VerseSearchEngine(VerseIndex(sample_verses), config)


@pytest.fixture
def corpus_file(tmp_path: Path, sample_text: str) -> Path:
    """The sample corpus written to disk."""
    path = tmp_path / "kjv.txt"
    path.write_text(sample_text, encoding="utf-8")
    return path
