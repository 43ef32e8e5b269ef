"""Response Emitter — turns an OperationOutcome into exactly one JSON response.

Invariants:
    - Success: status 200, payload verbatim (no wrapping, key order preserved)
    - Failure: raised as a GatewayError so the global handler writes {"error": message}
"""

from fastapi.responses import JSONResponse

from appstore_gateway.core.classify_errors import classify_failure
from appstore_gateway.core.domain_types import (
    ClassifiedError, OperationKind, OperationOutcome, OperationSuccess,
)
from appstore_gateway.core.errors import (
    GatewayError, UpstreamError, UpstreamNotFoundError,
)


def emit_response(kind: OperationKind, outcome: OperationOutcome) -> JSONResponse:
    if isinstance(outcome, OperationSuccess):
        return JSONResponse(content=outcome.payload)
    raise to_gateway_error(classify_failure(kind, outcome))


def to_gateway_error(error: ClassifiedError) -> GatewayError:
    if error.status_code == 404:
        return UpstreamNotFoundError(error.message)
    return UpstreamError(error.message)
