"""
FastAPI middleware for request tracing and logging.

Every request gets a short request id (or keeps the caller's X-Request-ID),
which is bound into the structlog context so catalog, semantic-search and
store log lines can be correlated.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import bind_context, clear_context, get_logger


logger = get_logger(__name__)

# Orchestrator probes hit these every few seconds; keep them out of INFO
PROBE_PATHS = frozenset({"/health", "/live", "/ready"})


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Binds request_id / method / path for the lifetime of a request, logs the
    outcome with its duration, and returns X-Request-ID and X-Response-Time.

    Responses with a 5xx status are logged at WARNING; exceptions that escape
    the app are logged at ERROR and re-raised.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        path = request.url.path
        log = logger.debug if path in PROBE_PATHS else logger.info

        bind_context(request_id=request_id, method=request.method, path=path)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(start),
            )
            raise
        else:
            duration_ms = _elapsed_ms(start)
            if response.status_code >= 500:
                logger.warning("Request errored", status_code=response.status_code, duration_ms=duration_ms)
            else:
                log(
                    "Request completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    query=str(request.query_params) or None,
                )
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            return response
        finally:
            clear_context()
