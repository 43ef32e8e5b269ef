"""Error Hierarchy — typed, categorized exceptions for all gateway failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() always produces the flat envelope {"error": <message>}
    - ConfigurationError is process-fatal; it is never turned into an HTTP response
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with GatewayError base: FastAPI global handler catches all
    - Flat envelope over nested code/category: clients of the proxy only read "error"
"""

from enum import Enum


UNAUTHORIZED_MESSAGE = "Unauthorized - Invalid API Key"
INVALID_REQUEST_MESSAGE = "Invalid request data"


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    CONFIGURATION = "configuration"


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the gateway's REST error envelope."""
        return {"error": self.message}


# ─── Request Errors ─────────────────────────────────────────────

class UnauthorizedError(GatewayError):
    """Missing or incorrect API key."""
    def __init__(self):
        super().__init__(
            UNAUTHORIZED_MESSAGE, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401,
        )


class InvalidRequestError(GatewayError):
    """Request parameters failed framework validation."""
    def __init__(self):
        super().__init__(
            INVALID_REQUEST_MESSAGE, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )


class UpstreamNotFoundError(GatewayError):
    """Store reported that the requested resource does not exist."""
    def __init__(self, message: str):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )


class UpstreamError(GatewayError):
    """Store call failed for any other reason."""
    def __init__(self, message: str):
        super().__init__(
            message, "UPSTREAM_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, 500,
        )


# ─── Process Errors ─────────────────────────────────────────────

class ConfigurationError(GatewayError):
    """Settings invalid at startup. Fatal to the whole process."""
    def __init__(self, message: str):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )
