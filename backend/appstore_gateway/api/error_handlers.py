"""Error Handlers — global exception handlers for the gateway.

Invariants:
    - GatewayError → its http_status with {"error": message}
    - RequestValidationError → 400 {"error": "Invalid request data"}
    - HTTPException (unknown route, wrong method) → same envelope with its detail
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Layered handlers: domain (GatewayError), validation (Pydantic),
      framework (HTTPException), catch-all (Exception)
    - Log level follows ErrorSeverity so expected 404s don't page anyone
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from appstore_gateway.core.errors import (
    ErrorSeverity, GatewayError, InvalidRequestError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_exception_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:
    """Register gateway domain/upstream error handler."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.log(
            _LOG_LEVELS[exc.severity],
            f"GatewayError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        error = InvalidRequestError()
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": error.code, "path": request.url.path,
                   "status_code": error.http_status},
        )
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _register_http_exception_handler(app: FastAPI) -> None:
    """Register framework HTTP error handler (404 route, 405 method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=exc.headers,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "status_code": 500},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )
