"""Parameter Normalizer — coerces raw path/query values into the shape the store expects.

Invariants:
    - Only `list` coerces, and only its `category` and `num` fields
    - Never raises: unparseable numbers become NaN and flow downstream unchanged
    - Input mapping is never mutated; a new dict is returned

Design Decisions:
    - Coercion follows JavaScript Number() rules (blank -> 0, 0x/0o/0b prefixes,
      "Infinity") since store clients of this shape were written against them
    - NaN over raising: the store owns validation of its own parameters
"""

import math
from collections.abc import Mapping
from typing import Any

from appstore_gateway.core.domain_types import OperationKind

NUMERIC_FIELDS: dict[OperationKind, frozenset[str]] = {
    OperationKind.LIST: frozenset({"category", "num"}),
}

_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}
_RADIX_PREFIXES = ("0x", "0o", "0b", "0X", "0O", "0B")
_FLOAT_WORDS = ("nan", "inf")


def normalize_params(kind: OperationKind, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return NormalizedParameters for one operation."""
    params = dict(raw)
    for name in NUMERIC_FIELDS.get(kind, ()):
        if name in params:
            params[name] = to_number(params[name])
    return params


def to_number(value: Any) -> int | float:
    """Coerce like JavaScript Number(). Returns NaN for anything unparseable."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    text = str(value).strip()
    if not text:
        return 0
    if text in _INFINITY:
        return _INFINITY[text]
    if not text.isascii() or "_" in text:
        return math.nan
    if text.startswith(_RADIX_PREFIXES):
        try:
            return int(text, 0)
        except ValueError:
            return math.nan
    try:
        return int(text)
    except ValueError:
        pass
    # float() also accepts "nan"/"inf" spellings that Number() rejects
    if text.lstrip("+-").lower().startswith(_FLOAT_WORDS):
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan
