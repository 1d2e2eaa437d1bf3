"""Request logging middleware capturing structured metadata."""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils.logging import get_logger
from ..utils.metrics import observe_request

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured line per request and record request metrics."""

    def __init__(
        self,
        app,
        exempt_paths: Iterable[str] | None = None,
        metrics_enabled: bool = True,
    ) -> None:
        super().__init__(app)
        self.exempt_paths = set(exempt_paths or [])
        self.metrics_enabled = metrics_enabled

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        path = request.url.path
        method = request.method
        context = {
            "request_id": request_id,
            "path": path,
            "method": method,
            "query": str(request.url.query) or None,
        }
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001
            duration = time.perf_counter() - start
            logger.exception(
                "request_error",
                extra={**context, "duration_ms": round(duration * 1000, 3)},
            )
            if self.metrics_enabled:
                observe_request(method, self._metric_path(request), 500, duration)
            raise

        duration = time.perf_counter() - start
        if path not in self.exempt_paths:
            logger.info(
                "request",
                extra={
                    **context,
                    "status_code": response.status_code,
                    "duration_ms": round(duration * 1000, 3),
                },
            )

        if self.metrics_enabled:
            observe_request(method, self._metric_path(request), response.status_code, duration)

        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @staticmethod
    def _metric_path(request: Request) -> str:
        # Route templates keep label cardinality bounded (/plans/{name}).
        route = request.scope.get("route")
        return getattr(route, "path", request.url.path)


__all__ = ["RequestLoggingMiddleware"]
