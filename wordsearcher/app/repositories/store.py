"""Document store capability and its asyncpg implementation."""

from __future__ import annotations

from typing import Any, Protocol

import asyncpg

from ..config import settings
from ..errors import StoreError
from ..query.predicates import Filter, LookupKey, SearchPipeline
from ..utils.logging import get_logger
from ..utils.metrics import QueryTimer
from ..utils.observability import get_tracer
from .sql import render_aggregate, render_find, render_find_one

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class VerseStore(Protocol):
    """What the services need from a document store."""

    async def find(self, table: str, predicate: Filter) -> list[dict[str, Any]]: ...

    async def aggregate(self, table: str, pipeline: SearchPipeline) -> list[dict[str, Any]]: ...

    async def find_one(self, table: str, key: LookupKey) -> dict[str, Any] | None: ...


class PostgresStore:
    """Executes compiled predicates against PostgreSQL."""

    def __init__(self, conn: asyncpg.Connection, dictionary: str | None = None) -> None:
        self._conn = conn
        self._dictionary = dictionary or settings.FTS_DICTIONARY

    async def find(self, table: str, predicate: Filter) -> list[dict[str, Any]]:
        sql, params = render_find(table, predicate)
        rows = await self._fetch(f"find:{table}", sql, params)
        return [dict(r) for r in rows]

    async def aggregate(self, table: str, pipeline: SearchPipeline) -> list[dict[str, Any]]:
        sql, params = render_aggregate(table, pipeline, self._dictionary)
        rows = await self._fetch(f"aggregate:{table}", sql, params)
        return [dict(r) for r in rows]

    async def find_one(self, table: str, key: LookupKey) -> dict[str, Any] | None:
        sql, params = render_find_one(table, key)
        with tracer.start_as_current_span(f"store.find_one:{table}"), QueryTimer(
            f"find_one:{table}"
        ):
            try:
                row = await self._conn.fetchrow(sql, *params)
            except asyncpg.PostgresError as exc:
                logger.error("store_query_failed", extra={"query": f"find_one:{table}"})
                raise StoreError(f"Error finding {key.value!r} in {table}: {exc}") from exc
        return dict(row) if row else None

    async def _fetch(self, label: str, sql: str, params: list[Any]) -> list[Any]:
        with tracer.start_as_current_span(f"store.{label}"), QueryTimer(label):
            try:
                return await self._conn.fetch(sql, *params)
            except asyncpg.PostgresError as exc:
                logger.error("store_query_failed", extra={"query": label})
                raise StoreError(f"Error running {label}: {exc}") from exc


__all__ = ["PostgresStore", "VerseStore"]
