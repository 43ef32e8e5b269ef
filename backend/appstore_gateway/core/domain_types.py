"""Domain Types — rich types that replace bare primitives across the gateway.

Invariants:
    - OperationKind has exactly 8 members, one per proxied store call
    - FailureKind is the only place a downstream failure is tagged
    - All valid states encoded as Enums — no raw string matching outside classify_failure

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: values double as log fields and route names
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

Credential = NewType("Credential", str)


# ─── Enums ───────────────────────────────────────────────────────

class OperationKind(str, Enum):
    """The 8 proxied store operations. Value is the logical operation name."""
    APP = "app"
    LIST = "list"
    SEARCH = "search"
    DEVELOPER = "developer"
    REVIEWS = "reviews"
    SIMILAR = "similar"
    PRIVACY = "privacy"
    VERSION_HISTORY = "versionHistory"


class AuthDecision(str, Enum):
    """Key Validator verdict."""
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"


class FailureKind(str, Enum):
    """Downstream failure tag, assigned once at the store boundary."""
    NOT_FOUND = "not_found"
    OTHER = "other"


# ─── Operation Outcome ───────────────────────────────────────────

@dataclass(frozen=True)
class OperationSuccess:
    """Downstream payload, emitted verbatim."""
    payload: Any


@dataclass(frozen=True)
class OperationFailure:
    """Downstream failure carrying only its message text."""
    kind: FailureKind
    message: str


OperationOutcome = Union[OperationSuccess, OperationFailure]


@dataclass(frozen=True)
class ClassifiedError:
    """HTTP status + message for one failed request. Never persisted."""
    status_code: int
    message: str
