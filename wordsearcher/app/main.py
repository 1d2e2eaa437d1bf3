"""
Wordsearcher FastAPI Application

Scripture corpus API with range lookups and full-text search.
Provides REST endpoints for:
- Verse ranges within a chapter, or whole chapters
- Book ranges and chapter ranges
- Named custom ranges
- Full-text search with phrase matching and testament filters
- Bible reading plans and daily readings

Architecture:
    - Compilers: request validation and store-agnostic predicates (app/query)
    - Store: PostgreSQL via asyncpg, full-text search with ts_rank_cd scoring
    - Services: compile, execute, project into response models

Environment Configuration:
    All settings loaded from environment / .env via pydantic-settings.
    See wordsearcher/app/config.py for available configuration options.

API Endpoints:
    - /v1/healthz, /v1/readyz: Health checks
    - /v1/verses/*: Verse, book, chapter and custom range retrieval
    - /v1/search: Full-text search
    - /v1/plans/*: Reading plans
    - /metrics: Prometheus metrics

Interactive Documentation:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db.postgres_async import create_pool
from .errors import StoreError
from .middleware.request_logging import RequestLoggingMiddleware
from .routers import health, monitoring, plans, search, verses
from .utils.logging import configure_logging, get_logger
from .utils.observability import configure_tracing

VERSION = "0.1.0"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Creates the asyncpg pool on startup and stores it on ``app.state`` where
    the ``get_pg`` dependency finds it; closes it on shutdown.
    """
    app.state.pg_pool = await create_pool()
    logger.info("store_pool_ready", extra={"max_size": settings.PG_POOL_MAX_SIZE})

    try:
        yield
    finally:
        await app.state.pg_pool.close()
        app.state.pg_pool = None
        logger.info("store_pool_closed")


configure_logging(settings.LOG_LEVEL, service_name=settings.SERVICE_NAME)

app = FastAPI(
    title="Wordsearcher API",
    description="Scripture range lookups and full-text search",
    version=VERSION,
    lifespan=lifespan,
    default_response_class=JSONResponse,
)

tracer_provider = configure_tracing(
    settings,
    service_name=settings.SERVICE_NAME,
    service_version=VERSION,
)

if tracer_provider is not None:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Report store failures as a single terminal 500."""
    logger.error(
        "store_error",
        exc_info=exc,
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return JSONResponse(status_code=500, content={"detail": "internal store error"})


# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with API prefix
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(verses.router, prefix=settings.API_PREFIX)
app.include_router(search.router, prefix=settings.API_PREFIX)
app.include_router(plans.router, prefix=settings.API_PREFIX)
app.include_router(monitoring.router)  # No prefix - uses /metrics directly

app.add_middleware(
    RequestLoggingMiddleware,
    exempt_paths={
        "/metrics",
        f"{settings.API_PREFIX}/healthz",
        f"{settings.API_PREFIX}/readyz",
    },
)
