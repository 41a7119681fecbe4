"""REST endpoints for managing users."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from gallery_api.core.errors import Failure
from gallery_api.core.observability import timing_dependency_factory
from gallery_api.core.responses import ApiResponse, failure_response, responses, success_response

from .deps import get_user_service
from .schemas import User, UserDeletedData, UserIn, UserListData
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(timing_dependency_factory("users"))],
)

_BODY_DOC = {"requestBody": {"content": {"application/json": {"schema": UserIn.model_json_schema()}}}}


async def _read_json(request: Request) -> Tuple[Any, Optional[Failure]]:
    raw = await request.body()
    try:
        return json.loads(raw or b"null"), None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return None, Failure.bad_request(f"Request body must be valid JSON: {exc}")


@router.get("", response_model=ApiResponse[UserListData])
async def list_users(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Return all users, optionally sliced by ``limit``/``offset``."""

    try:
        page = service.list_users(limit=limit, offset=offset)
    except Exception as exc:  # pragma: no cover - store is in-memory
        logger.exception("Failed to list users")
        return responses.internal_server_error(str(exc) or "Failed to retrieve users")

    data = UserListData(users=page.items, total=page.total, count=page.count)
    return success_response(data, status.HTTP_200_OK, **page.meta())


@router.post(
    "",
    response_model=ApiResponse[User],
    status_code=status.HTTP_201_CREATED,
    openapi_extra=_BODY_DOC,
)
async def create_user(request: Request, service: UserService = Depends(get_user_service)) -> JSONResponse:
    body, failure = await _read_json(request)
    if failure is not None:
        return failure_response(failure)

    result = service.create_user(body)
    if isinstance(result, Failure):
        return failure_response(result)
    return responses.created(result)


@router.get("/{user_id}", response_model=ApiResponse[User])
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> JSONResponse:
    result = service.get_user(user_id)
    if isinstance(result, Failure):
        return failure_response(result)
    return responses.ok(result)


async def _update_user(user_id: str, request: Request, service: UserService) -> JSONResponse:
    # an unknown id wins over a malformed body
    existing = service.get_user(user_id)
    if isinstance(existing, Failure):
        return failure_response(existing)

    body, failure = await _read_json(request)
    if failure is not None:
        return failure_response(failure)

    result = service.update_user(user_id, body)
    if isinstance(result, Failure):
        return failure_response(result)
    return responses.ok(result)


@router.put("/{user_id}", response_model=ApiResponse[User], openapi_extra=_BODY_DOC)
async def replace_user(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    return await _update_user(user_id, request, service)


@router.patch("/{user_id}", response_model=ApiResponse[User], openapi_extra=_BODY_DOC)
async def patch_user(
    user_id: str,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Same semantics as PUT: only the fields present in the body change."""

    return await _update_user(user_id, request, service)


@router.delete("/{user_id}", response_model=ApiResponse[UserDeletedData])
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)) -> JSONResponse:
    result = service.delete_user(user_id)
    if isinstance(result, Failure):
        return failure_response(result)
    return responses.ok(UserDeletedData(message="User deleted successfully", user=result))
