"""Error Classifier — maps a store failure to an HTTP status.

Invariants:
    - Message substring "404" or "not found" (case-sensitive) tags FailureKind.NOT_FOUND
    - Only app, developer, privacy and versionHistory may answer 404
    - list, search, reviews and similar answer 500 for every failure
    - The textual heuristic lives only in detect_failure_kind()

Design Decisions:
    - Two steps: tag at the store boundary, then apply per-operation policy.
      Replacing the heuristic later touches one function
"""

from appstore_gateway.core.domain_types import (
    ClassifiedError, FailureKind, OperationFailure, OperationKind,
)

NOT_FOUND_MARKERS = ("404", "not found")

NOT_FOUND_AWARE: frozenset[OperationKind] = frozenset({
    OperationKind.APP,
    OperationKind.DEVELOPER,
    OperationKind.PRIVACY,
    OperationKind.VERSION_HISTORY,
})


def detect_failure_kind(message: str) -> FailureKind:
    """Tag a raw store failure message."""
    if any(marker in message for marker in NOT_FOUND_MARKERS):
        return FailureKind.NOT_FOUND
    return FailureKind.OTHER


def classify_failure(kind: OperationKind, failure: OperationFailure) -> ClassifiedError:
    """Decide the response status for a failed operation."""
    if kind in NOT_FOUND_AWARE and failure.kind is FailureKind.NOT_FOUND:
        return ClassifiedError(404, failure.message)
    return ClassifiedError(500, failure.message)
