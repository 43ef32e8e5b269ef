"""Response Emitter — tests for outcome -> response/GatewayError mapping."""

import pytest

from appstore_gateway.api.emit_response import emit_response, to_gateway_error
from appstore_gateway.core.domain_types import (
    ClassifiedError, FailureKind, OperationFailure, OperationKind, OperationSuccess,
)
from appstore_gateway.core.errors import UpstreamError, UpstreamNotFoundError


def test_success_renders_payload_compactly():
    response = emit_response(OperationKind.APP, OperationSuccess({"id": 1, "a": [1]}))
    assert response.status_code == 200
    assert response.body == b'{"id":1,"a":[1]}'


def test_not_found_failure_raises_404_error():
    failure = OperationFailure(FailureKind.NOT_FOUND, "App not found (404)")
    with pytest.raises(UpstreamNotFoundError) as exc_info:
        emit_response(OperationKind.APP, failure)
    assert exc_info.value.to_response() == {"error": "App not found (404)"}


def test_not_found_on_list_raises_500_error():
    failure = OperationFailure(FailureKind.NOT_FOUND, "App not found (404)")
    with pytest.raises(UpstreamError):
        emit_response(OperationKind.LIST, failure)


def test_to_gateway_error_maps_status():
    assert isinstance(to_gateway_error(ClassifiedError(404, "x")), UpstreamNotFoundError)
    assert isinstance(to_gateway_error(ClassifiedError(500, "x")), UpstreamError)
