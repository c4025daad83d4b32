"""Exception handlers for the FastAPI application.

Every error leaves the API as ``{"error_code", "message", "details"}``.
Server-side failures (5xx) always carry a fixed message; their cause is only
ever written to the log.
"""

from typing import Any, Mapping

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Render domain errors; 5xx are logged with their underlying cause."""
        if exc.status_code >= 500:
            cause = exc.__cause__
            logger.error(
                "app_exception",
                error_code=exc.error_code.value,
                status_code=exc.status_code,
                cause_type=type(cause).__name__ if cause else None,
            )
            message = INTERNAL_ERROR_MESSAGE
        else:
            logger.warning(
                "app_exception",
                error_code=exc.error_code.value,
                message=exc.message,
                status_code=exc.status_code,
            )
            message = exc.message
        return _error_response(exc.status_code, exc.error_code.value, message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render routing errors (404 for unknown paths, 405 for other methods)."""
        return _error_response(
            exc.status_code,
            "HTTP_ERROR",
            exc.detail,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log anything unexpected and answer with the fixed 500 body."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=exc,
        )
        return _error_response(
            500,
            ErrorCode.INTERNAL_ERROR.value,
            INTERNAL_ERROR_MESSAGE,
            {"request_id": request_id},
        )
