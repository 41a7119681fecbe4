"""Error taxonomy shared by the API handlers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Machine readable error codes carried in the error envelope."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_CODE[self]


_STATUS_BY_CODE = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


def code_for_status(status_code: int) -> ErrorCode:
    """Return the closest error code for an arbitrary HTTP status."""

    for code, status in _STATUS_BY_CODE.items():
        if status == status_code:
            return code
    return ErrorCode.INTERNAL_SERVER_ERROR if status_code >= 500 else ErrorCode.BAD_REQUEST


@dataclass(frozen=True)
class Failure:
    """An expected, request-scoped failure returned by a service call."""

    code: ErrorCode
    message: str

    @property
    def status_code(self) -> int:
        return self.code.status_code

    @classmethod
    def bad_request(cls, message: str) -> "Failure":
        return cls(ErrorCode.BAD_REQUEST, message)

    @classmethod
    def not_found(cls, message: str) -> "Failure":
        return cls(ErrorCode.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "Failure":
        return cls(ErrorCode.CONFLICT, message)


class StorageError(RuntimeError):
    """Raised when image bytes cannot be decoded, written or removed."""


__all__ = ["ErrorCode", "Failure", "StorageError", "code_for_status"]
