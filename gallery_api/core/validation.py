"""Validation helpers for request payloads.

Every helper takes the raw value plus the name of the field being checked and
returns a :class:`Validated` result.  A result either carries the normalised
value or a :class:`ValidationError` whose message reads
``"<field> must be <constraint>"`` (or ``"<field> is required"``).  Callers
branch on :attr:`Validated.ok` instead of catching exceptions.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$", re.IGNORECASE)
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ValidationError:
    """A field-scoped validation failure."""

    field: str
    message: str


@dataclass(frozen=True)
class Validated(Generic[T]):
    value: Optional[T] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Validated[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, field: str, message: str) -> "Validated[T]":
        return cls(error=ValidationError(field=field, message=message))


def require(value: Any, field: str) -> Validated[Any]:
    if value is None:
        return Validated.failure(field, f"{field} is required")
    return Validated.success(value)


def non_empty_string(value: Any, field: str) -> Validated[str]:
    if not isinstance(value, str) or not value.strip():
        return Validated.failure(field, f"{field} must be a non-empty string")
    return Validated.success(value.strip())


def valid_email(value: Any, field: str = "email") -> Validated[str]:
    result = non_empty_string(value, field)
    if not result.ok:
        return result
    if not EMAIL_PATTERN.match(result.value):
        return Validated.failure(field, f"{field} must be a valid email address")
    return result


def number_in_range(value: Any, minimum: float, maximum: float, field: str) -> Validated[float]:
    """Accept finite ints and floats within ``[minimum, maximum]``."""

    # bool is an int subclass but never a meaningful number here
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return Validated.failure(field, f"{field} must be a number")
    if value < minimum or value > maximum:
        return Validated.failure(field, f"{field} must be between {minimum} and {maximum}")
    return Validated.success(value)


def valid_uuid(value: Any, field: str = "id") -> Validated[str]:
    result = non_empty_string(value, field)
    if not result.ok:
        return result
    if not UUID_PATTERN.match(result.value):
        return Validated.failure(field, f"{field} must be a valid UUID")
    return result


def required_fields(body: Any, fields: Iterable[str]) -> Validated[Mapping[str, Any]]:
    """Check that ``body`` is a mapping holding a non-null value for each key."""

    if not isinstance(body, Mapping):
        return Validated.failure("body", "Request body must be an object")

    for key in fields:
        if body.get(key) is None:
            return Validated.failure(key, f"{key} is required")
    return Validated.success(body)


__all__ = [
    "Validated",
    "ValidationError",
    "non_empty_string",
    "number_in_range",
    "require",
    "required_fields",
    "valid_email",
    "valid_uuid",
]
