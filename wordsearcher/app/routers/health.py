"""
Health check router.

``/healthz`` answers without touching the database so liveness probes stay
fast during store outages. ``/readyz`` runs a trivial query and reports
whether the corpus store is reachable.

Example Usage:
    ```bash
    curl http://localhost:8000/v1/healthz
    # Response: {"ok": true}
    ```
"""

import asyncpg
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..utils.logging import get_logger

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/healthz", response_model=dict[str, bool])
def healthz() -> dict[str, bool]:
    """Liveness probe; always ``{"ok": true}`` while the process serves requests."""
    return {"ok": True}


@router.get("/readyz", response_model=dict[str, bool])
async def readyz(request: Request):
    """
    Readiness probe.

    Acquires from the pool itself so connection failures are reported as
    not ready instead of a dependency error.

    Status Codes:
        200: The corpus store answered
        503: No connection could be acquired or the query failed
    """
    pool = request.app.state.pg_pool
    try:
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except (asyncpg.PostgresError, OSError):
        logger.warning("readiness_check_failed", exc_info=True)
        return JSONResponse(status_code=503, content={"ok": False})
    return {"ok": True}
