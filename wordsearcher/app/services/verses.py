"""Business logic for verse range and custom range retrieval."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import NotFoundError, OutOfRangeError, StoreError
from ..models import CustomRange, Verse
from ..query.predicates import CompiledPredicate
from ..query.ranges import (
    compile_book_range,
    compile_chapter_or_verse,
    compile_chapter_range,
    compile_custom_range_lookup,
)
from ..repositories.store import VerseStore
from ..utils.logging import get_logger
from ..utils.metrics import COMPILED_QUERIES, REJECTED_QUERIES

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
PredicateT = TypeVar("PredicateT", bound=CompiledPredicate)

VERSE_TABLE = "verse"
CUSTOM_RANGE_TABLE = "customrange"


def compile_counted(kind: str, compile_fn: Callable[..., PredicateT], *args: Any) -> PredicateT:
    """Run a compiler, recording the outcome under ``kind``."""
    try:
        predicate = compile_fn(*args)
    except OutOfRangeError as exc:
        REJECTED_QUERIES.labels(kind=kind, field=exc.field).inc()
        logger.info(
            "query_rejected",
            extra={"kind": kind, "field": exc.field, "value": exc.value},
        )
        raise
    COMPILED_QUERIES.labels(kind=kind).inc()
    return predicate


def project(rows: list[dict[str, Any]], model: type[ModelT]) -> list[ModelT]:
    """Shape store rows into response models."""
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as exc:
        raise StoreError(f"Error decoding store rows into {model.__name__}: {exc}") from exc


class VerseService:
    """Validates range requests and runs them against the store."""

    def __init__(self, store: VerseStore) -> None:
        self._store = store

    async def verse_range(
        self,
        book: int,
        chapter: int,
        verse_start: int,
        verse_end: int,
    ) -> list[Verse]:
        """Return a verse range, or the whole chapter when ``verse_start`` is 0."""
        predicate = compile_counted(
            "verse", compile_chapter_or_verse, book, chapter, verse_start, verse_end
        )
        rows = await self._store.find(VERSE_TABLE, predicate)
        return project(rows, Verse)

    async def book_range(self, start: int, end: int) -> list[Verse]:
        predicate = compile_counted("book_range", compile_book_range, start, end)
        rows = await self._store.find(VERSE_TABLE, predicate)
        return project(rows, Verse)

    async def chapter_range(self, book: int, start: int, end: int) -> list[Verse]:
        predicate = compile_counted("chapter_range", compile_chapter_range, book, start, end)
        rows = await self._store.find(VERSE_TABLE, predicate)
        return project(rows, Verse)

    async def custom_range(self, name: str) -> CustomRange:
        """Return the named custom range.

        Raises:
            NotFoundError: If no custom range has this name
        """
        key = compile_counted("custom_range", compile_custom_range_lookup, name)
        row = await self._store.find_one(CUSTOM_RANGE_TABLE, key)
        if row is None:
            raise NotFoundError(f"Could not find the custom range named {name}")
        return project([row], CustomRange)[0]
