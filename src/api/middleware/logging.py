"""Request logging middleware."""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Probed constantly by load balancers
QUIET_PATHS = frozenset({"/api/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, with status and duration."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        path = request.url.path

        with structlog.contextvars.bound_contextvars(method=request.method, path=path):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_failed",
                    error_type=type(e).__name__,
                    duration_ms=_elapsed_ms(start_time),
                )
                raise

            if response.status_code >= 500:
                log = logger.error
            elif path in QUIET_PATHS:
                log = logger.debug
            else:
                log = logger.info
            log(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start_time),
            )
            return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
