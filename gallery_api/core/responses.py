"""Uniform JSON envelope used by every API response."""
from __future__ import annotations

from typing import Any, Dict, Generic, Optional, TypeVar

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorCode, Failure
from .utils import utc_timestamp

T = TypeVar("T")


class ResponseMeta(BaseModel):
    """Metadata attached to every envelope."""

    model_config = ConfigDict(extra="allow")

    timestamp: str = Field(..., description="ISO-8601 time the response was produced")


class ErrorDetail(BaseModel):
    message: str
    code: Optional[str] = None


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None
    meta: ResponseMeta


def success_response(data: Any, status_code: int = status.HTTP_200_OK, **meta: Any) -> JSONResponse:
    """Wrap ``data`` in a success envelope; ``meta`` extends the timestamp block."""

    content = {
        "success": True,
        "data": jsonable_encoder(data),
        "meta": {"timestamp": utc_timestamp(), **jsonable_encoder(meta)},
    }
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    code: Optional[ErrorCode | str] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "success": False,
        "error": {
            "message": message,
            "code": code.value if isinstance(code, ErrorCode) else code,
        },
        "meta": {"timestamp": utc_timestamp()},
    }
    return JSONResponse(status_code=status_code, content=content)


def failure_response(failure: Failure) -> JSONResponse:
    return error_response(failure.message, failure.status_code, failure.code)


class _Responses:
    """Shortcuts for the common status codes."""

    @staticmethod
    def bad_request(message: str = "Bad Request") -> JSONResponse:
        return error_response(message, status.HTTP_400_BAD_REQUEST, ErrorCode.BAD_REQUEST)

    @staticmethod
    def unauthorized(message: str = "Unauthorized") -> JSONResponse:
        return error_response(message, status.HTTP_401_UNAUTHORIZED, ErrorCode.UNAUTHORIZED)

    @staticmethod
    def forbidden(message: str = "Forbidden") -> JSONResponse:
        return error_response(message, status.HTTP_403_FORBIDDEN, ErrorCode.FORBIDDEN)

    @staticmethod
    def not_found(message: str = "Not Found") -> JSONResponse:
        return error_response(message, status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND)

    @staticmethod
    def conflict(message: str = "Conflict") -> JSONResponse:
        return error_response(message, status.HTTP_409_CONFLICT, ErrorCode.CONFLICT)

    @staticmethod
    def internal_server_error(message: str = "Internal Server Error") -> JSONResponse:
        return error_response(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.INTERNAL_SERVER_ERROR,
        )

    @staticmethod
    def ok(data: Any) -> JSONResponse:
        return success_response(data, status.HTTP_200_OK)

    @staticmethod
    def created(data: Any) -> JSONResponse:
        return success_response(data, status.HTTP_201_CREATED)

    @staticmethod
    def no_content() -> Response:
        return Response(status_code=status.HTTP_204_NO_CONTENT)


responses = _Responses()


__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ResponseMeta",
    "error_response",
    "failure_response",
    "responses",
    "success_response",
]
