# backend/nutrisync/core/errors.py
"""
Engine error types and enum coercion helpers
"""

import math
from enum import Enum
from typing import Type, TypeVar, Any

E = TypeVar("E", bound=Enum)


class InvalidArgumentError(ValueError):
    """Raised when a caller passes input the engine cannot compute with"""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


def coerce_enum(enum_cls: Type[E], value: Any, field: str) -> E:
    """Convert a raw string (or member) into a closed enum, failing loudly on unknown values"""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(field, value, f"expected one of: {allowed}") from None


def _require_finite_number(value: Any, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(field, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidArgumentError(field, value, "must be finite")


def require_positive(value: Any, field: str) -> None:
    _require_finite_number(value, field)
    if value <= 0:
        raise InvalidArgumentError(field, value, "must be positive")


def require_non_negative(value: Any, field: str) -> None:
    _require_finite_number(value, field)
    if value < 0:
        raise InvalidArgumentError(field, value, "must not be negative")
