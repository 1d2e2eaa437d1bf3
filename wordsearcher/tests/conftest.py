"""
Pytest configuration and shared fixtures for Wordsearcher tests.

Provides:
- An in-memory store evaluating compiled predicates over sample rows
- A mocked asyncpg connection and a fake pool for store adapter tests
- Test client setup with FastAPI TestClient and dependency overrides
- Sample corpus, custom range and reading plan data
"""

import logging
import re
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from wordsearcher.app import main as app_main
from wordsearcher.app.dependencies.store import get_store
from wordsearcher.app.main import app
from wordsearcher.app.query.predicates import (
    AnyTermMatch,
    Between,
    Bound,
    Conjunction,
    Equals,
    Filter,
    LookupKey,
    PhraseMatch,
    SearchPipeline,
)

# ============================================================================
# Logging Configuration for Tests
# ============================================================================

test_logger = logging.getLogger("tests")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests with in-memory dependencies")


def pytest_runtest_setup(item):
    test_logger.debug(f"Setting up test: {item.nodeid}")


# ============================================================================
# Sample Data
# ============================================================================


def _verse(book, book_name, chapter, verse, text, keywords=""):
    return {
        "book": book,
        "book_name": book_name,
        "chapter": chapter,
        "verse": verse,
        "text": text,
        "keywords": keywords,
    }


SAMPLE_VERSES = [
    _verse(1, "Genesis", 1, 1, "In the beginning God created the heaven and the earth.", "creation"),
    _verse(1, "Genesis", 1, 2, "And the earth was without form, and void.", "earth"),
    _verse(1, "Genesis", 1, 3, "And God said, Let there be light: and there was light.", "light"),
    _verse(1, "Genesis", 2, 1, "Thus the heavens and the earth were finished.", "finished"),
    _verse(2, "Exodus", 1, 1, "Now these are the names of the children of Israel.", "names"),
    _verse(3, "Leviticus", 1, 1, "And the LORD called unto Moses.", "called"),
    _verse(6, "Joshua", 1, 1, "The LORD spake unto Joshua the son of Nun.", "joshua"),
    _verse(6, "Joshua", 4, 1, "The LORD spake unto Joshua, saying.", "joshua"),
    _verse(40, "Matthew", 1, 1, "The book of the generation of Jesus Christ.", "generation"),
    _verse(40, "Matthew", 3, 17, "This is my beloved Son, in whom I am well pleased.", "son"),
    _verse(40, "Matthew", 4, 1, "Then was Jesus led up of the spirit into the wilderness.", "spirit"),
    _verse(40, "Matthew", 5, 3, "Blessed are the poor in spirit.", "blessed"),
    _verse(43, "John", 3, 16, "For God so loved the world.", "love"),
]

SAMPLE_CUSTOM_RANGES = [
    {"name": "gospels", "type": "books", "book_number": 40, "custom_range": [40, 41, 42, 43]},
    {"name": "pentateuch", "type": "books", "book_number": 1, "custom_range": [1, 2, 3, 4, 5]},
]

SAMPLE_PLANS = [
    {"name": "McCheyneBasedYearly", "number": 1, "days": ["Genesis 1", "Genesis 2", "Genesis 3"]},
    {"name": "McCheyneBasedYearly", "number": 2, "days": ["Matthew 1", "Matthew 2", "Matthew 3"]},
    {"name": "McCheyneBasedYearly", "number": 3, "days": ["Ezra 1", "Ezra 2"]},
    {"name": "McCheyneBasedYearly", "number": 4, "days": ["Acts 1", "Acts 2", "Acts 3"]},
]


# ============================================================================
# In-memory Store
# ============================================================================

_WORD = re.compile(r"[a-z]+")


def _words(text: str) -> list[str]:
    return _WORD.findall(text.lower())


class InMemoryStore:
    """Evaluates compiled predicates over in-memory rows.

    Records every call in ``calls`` so tests can assert what reached the store.
    Text matching is a plain word comparison; the score is the number of
    matched words.
    """

    def __init__(self, tables: dict[str, list[dict[str, Any]]]) -> None:
        self.tables = tables
        self.calls: list[tuple[str, str, Any]] = []

    async def find(self, table: str, predicate: Filter) -> list[dict[str, Any]]:
        self.calls.append(("find", table, predicate))
        return [dict(row) for row in self.tables[table] if self._matches(row, predicate.clauses)]

    async def aggregate(self, table: str, pipeline: SearchPipeline) -> list[dict[str, Any]]:
        self.calls.append(("aggregate", table, pipeline))
        stage = pipeline.search
        clauses = stage.must if isinstance(stage, Conjunction) else (stage,)
        hits = []
        for row in self.tables[table]:
            if self._matches(row, clauses):
                hit = {key: row[key] for key in pipeline.project if key in row}
                hit["score"] = float(self._score(row, clauses))
                hits.append(hit)
        return sorted(hits, key=lambda hit: hit["score"], reverse=pipeline.sort.descending)

    async def find_one(self, table: str, key: LookupKey) -> dict[str, Any] | None:
        self.calls.append(("find_one", table, key))
        for row in self.tables[table]:
            if row.get(key.path) == key.value:
                return dict(row)
        return None

    def _matches(self, row: dict[str, Any], clauses) -> bool:
        return all(self._match(row, clause) for clause in clauses)

    @staticmethod
    def _match(row: dict[str, Any], clause) -> bool:
        value = row[clause.path]
        if isinstance(clause, Equals):
            return value == clause.value
        if isinstance(clause, Between):
            return clause.start <= value <= clause.end
        if isinstance(clause, Bound):
            return {
                "gt": value > clause.value,
                "gte": value >= clause.value,
                "lt": value < clause.value,
                "lte": value <= clause.value,
            }[clause.op]
        if isinstance(clause, AnyTermMatch):
            return bool(set(_words(clause.query)) & set(_words(value)))
        if isinstance(clause, PhraseMatch):
            return " ".join(_words(clause.query)) in " ".join(_words(value))
        raise TypeError(clause)

    @staticmethod
    def _score(row: dict[str, Any], clauses) -> int:
        score = 0
        for clause in clauses:
            if isinstance(clause, (AnyTermMatch, PhraseMatch)):
                row_words = _words(row[clause.path])
                score += sum(row_words.count(word) for word in set(_words(clause.query)))
        return score


@pytest.fixture
def memory_store() -> InMemoryStore:
    """In-memory store seeded with the sample corpus."""
    return InMemoryStore(
        {
            "verse": SAMPLE_VERSES,
            "customrange": SAMPLE_CUSTOM_RANGES,
            "readingplan": SAMPLE_PLANS,
        }
    )


# ============================================================================
# Mock Database Fixtures
# ============================================================================


@pytest.fixture
def mock_pg_conn():
    """
    Mock asyncpg connection.

    ``fetch`` and ``fetchrow`` return empty results unless a test configures
    ``return_value`` or ``side_effect``.
    """
    conn = AsyncMock()
    conn.fetch.return_value = []
    conn.fetchrow.return_value = None
    conn.fetchval.return_value = 1
    return conn


class _AcquireContext:
    """Awaitable and async context manager, like asyncpg's ``pool.acquire()``."""

    def __init__(self, pool: "FakePool") -> None:
        self._pool = pool
        self._conn = None

    def __await__(self):
        return self._pool._acquire().__await__()

    async def __aenter__(self):
        self._conn = await self._pool._acquire()
        return self._conn

    async def __aexit__(self, *exc_info) -> None:
        await self._pool.release(self._conn)


class FakePool:
    """Stand-in for ``asyncpg.Pool``; ``error`` is raised on every acquire."""

    def __init__(self, conn=None, error: BaseException | None = None) -> None:
        self.conn = conn
        self.error = error
        self.released: list[Any] = []

    def acquire(self) -> _AcquireContext:
        return _AcquireContext(self)

    async def _acquire(self):
        if self.error is not None:
            raise self.error
        return self.conn

    async def release(self, conn) -> None:
        self.released.append(conn)

    async def close(self) -> None:
        return None


# ============================================================================
# Test Client Fixtures
# ============================================================================


@pytest.fixture
def override_store(memory_store, monkeypatch):
    """
    Replace the pooled PostgreSQL store with the in-memory store.

    The lifespan pool factory is patched so no database is needed.
    """
    monkeypatch.setattr(app_main, "create_pool", AsyncMock(return_value=AsyncMock()))
    app.dependency_overrides[get_store] = lambda: memory_store

    yield memory_store

    app.dependency_overrides.clear()


@pytest.fixture
def client(override_store) -> Generator[TestClient, None, None]:
    """TestClient backed by the in-memory store."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def fake_pool():
    """Factory for :class:`FakePool` instances."""
    return FakePool
