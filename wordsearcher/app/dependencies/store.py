"""FastAPI dependency for the corpus store."""

from __future__ import annotations

import asyncpg
from fastapi import Depends

from ..db.postgres_async import get_pg
from ..repositories.store import PostgresStore, VerseStore


def get_store(conn: asyncpg.Connection = Depends(get_pg)) -> VerseStore:
    """Wrap the request's pooled connection in a store adapter."""

    return PostgresStore(conn)
