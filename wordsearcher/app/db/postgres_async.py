"""
Async PostgreSQL connection pooling for FastAPI.

The pool is created in the application lifespan and kept on ``app.state`` so
there is no module level connection handle. Routes receive one connection per
request through the :func:`get_pg` dependency and hand it to the store adapter.
"""

from collections.abc import AsyncIterator

import asyncpg
from fastapi import Request

from ..config import settings
from ..errors import StoreError
from ..utils.logging import get_logger

logger = get_logger(__name__)

def normalize_dsn(dsn: str) -> str:
    """
    Normalize a PostgreSQL DSN for asyncpg.

    Strips SQLAlchemy-style driver specifications (``postgresql+psycopg://``)
    and rewrites ``postgres://`` to ``postgresql://``.
    """
    if dsn.startswith(("postgresql+", "postgres+")):
        dsn = "postgresql://" + dsn.split("://", 1)[1]

    if dsn.startswith("postgres://"):
        dsn = "postgresql://" + dsn.split("://", 1)[1]

    return dsn


async def _init_conn(conn: asyncpg.Connection) -> None:
    """Apply per-connection session settings; values travel as parameters."""
    await conn.execute(
        """
        SELECT set_config('application_name', $1, false),
               set_config('statement_timeout', $2, false),
               set_config('idle_in_transaction_session_timeout', $2, false)
        """,
        settings.SERVICE_NAME,
        settings.PG_STATEMENT_TIMEOUT,
    )


async def create_pool(
    dsn: str | None = None,
    min_size: int | None = None,
    max_size: int | None = None,
) -> asyncpg.Pool:
    """
    Create an asyncpg pool for the corpus database.

    Args:
        dsn: Connection string; defaults to ``settings.DATABASE_URL``
        min_size: Minimum pooled connections
        max_size: Maximum pooled connections

    Raises:
        asyncpg.PostgresError: If the database cannot be reached
    """
    return await asyncpg.create_pool(
        dsn=normalize_dsn(dsn or settings.DATABASE_URL),
        min_size=min_size or settings.PG_POOL_MIN_SIZE,
        max_size=max_size or settings.PG_POOL_MAX_SIZE,
        max_inactive_connection_lifetime=60,
        init=_init_conn,
        statement_cache_size=1024,
    )


async def get_pg(request: Request) -> AsyncIterator[asyncpg.Connection]:
    """
    FastAPI dependency yielding a pooled connection for the current request.

    Raises:
        RuntimeError: If the lifespan did not create the pool
        StoreError: If no connection can be acquired
    """
    pool: asyncpg.Pool | None = getattr(request.app.state, "pg_pool", None)
    if pool is None:
        raise RuntimeError(
            "PostgreSQL connection pool not initialized. "
            "Call create_pool() in application lifespan."
        )

    try:
        conn = await pool.acquire()
    except (asyncpg.PostgresError, OSError) as exc:
        logger.error("store_acquire_failed", extra={"error": str(exc)})
        raise StoreError(f"Error acquiring a store connection: {exc}") from exc

    try:
        yield conn
    finally:
        await pool.release(conn)
