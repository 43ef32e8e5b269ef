"""Operation Dispatch — explicit routing from OperationKind to store call.

Invariants:
    - Every kind->method mapping is visible — no getattr magic, no auto-discovery
    - Exactly one store call per execute(); no retries, no timeout of its own
    - Store exceptions never escape: they become OperationFailure, tagged once here
    - Every call logged with operation name, outcome and duration

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - This is the single boundary where store failures cross into the core,
      so detect_failure_kind() is called here and nowhere else
"""

import logging
import time
from typing import Any

from appstore_gateway.core.classify_errors import detect_failure_kind
from appstore_gateway.core.domain_types import (
    OperationFailure, OperationKind, OperationOutcome, OperationSuccess,
)
from appstore_gateway.core.store_protocols import AppStore

logger = logging.getLogger(__name__)


class OperationDispatch:
    """Routes OperationKind -> store coroutine. Explicit registration."""

    def __init__(self, store: AppStore):
        self._store = store
        self._handlers = {
            OperationKind.APP: store.app,
            OperationKind.LIST: store.list,
            OperationKind.SEARCH: store.search,
            OperationKind.DEVELOPER: store.developer,
            OperationKind.REVIEWS: store.reviews,
            OperationKind.SIMILAR: store.similar,
            OperationKind.PRIVACY: store.privacy,
            OperationKind.VERSION_HISTORY: store.version_history,
        }

    async def execute(
        self, kind: OperationKind, params: dict[str, Any],
    ) -> OperationOutcome:
        """Invoke the store once and wrap the result."""
        handler = self._handlers[kind]
        started = time.perf_counter()
        try:
            payload = await handler(params)
        except Exception as e:
            message = _failure_message(e)
            failure = OperationFailure(detect_failure_kind(message), message)
            logger.warning(
                f"Store call '{kind.value}' failed: {message}",
                extra={
                    "operation": kind.value,
                    "error_code": failure.kind.value,
                    "duration_ms": _elapsed_ms(started),
                },
            )
            return failure
        logger.info(
            f"Store call '{kind.value}' succeeded",
            extra={"operation": kind.value, "duration_ms": _elapsed_ms(started)},
        )
        return OperationSuccess(payload)


def _failure_message(exc: Exception) -> str:
    """Message text of a store failure; falls back to the exception type."""
    return str(exc) or type(exc).__name__


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
