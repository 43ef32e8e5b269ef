"""API Key Middleware — rejects unauthenticated requests before any route runs.

Invariants:
    - Runs for every path, known or unknown, except the public ones (health probe)
    - Unauthorized requests never reach a route, so the store is never called
    - The supplied key is never logged

Design Decisions:
    - Middleware over a per-route Depends: one check covers the whole surface,
      including paths that would otherwise 404
    - KeyValidator injected at construction: no module-level secret
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from appstore_gateway.core.authorize import KeyValidator
from appstore_gateway.core.domain_types import AuthDecision
from appstore_gateway.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
PUBLIC_PATHS = frozenset({"/health"})


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Short-circuits with 401 unless x-api-key matches the configured secret."""

    def __init__(
        self, app, validator: KeyValidator,
        public_paths: frozenset[str] = PUBLIC_PATHS,
    ):
        super().__init__(app)
        self._validator = validator
        self._public_paths = public_paths

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self._public_paths:
            return await call_next(request)
        decision = self._validator.check(request.headers.get(API_KEY_HEADER))
        if decision is AuthDecision.UNAUTHORIZED:
            exc = UnauthorizedError()
            logger.warning(
                f"Rejected request to {request.url.path}: {exc.message}",
                extra={
                    "error_code": exc.code, "path": request.url.path,
                    "status_code": exc.http_status,
                },
            )
            return JSONResponse(
                status_code=exc.http_status, content=exc.to_response(),
            )
        return await call_next(request)
