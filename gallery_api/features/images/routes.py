"""REST endpoints for uploading and managing images."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import JSONResponse

from gallery_api.core.errors import Failure, StorageError
from gallery_api.core.observability import timing_dependency_factory
from gallery_api.core.responses import ApiResponse, failure_response, responses, success_response

from .deps import get_image_service
from .schemas import Image, ImageDeletedData, ImageListData
from .service import MAX_FILE_SIZE, ImageService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/images",
    tags=["Images"],
    dependencies=[Depends(timing_dependency_factory("images"))],
)


@router.get("", response_model=ApiResponse[ImageListData])
async def list_images(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    service: ImageService = Depends(get_image_service),
) -> JSONResponse:
    """Return uploaded images, optionally sliced by ``limit``/``offset``."""

    try:
        page = service.list_images(limit=limit, offset=offset)
    except Exception as exc:  # pragma: no cover - store is in-memory
        logger.exception("Failed to list images")
        return responses.internal_server_error(str(exc) or "Failed to retrieve images")

    data = ImageListData(images=page.items, total=page.total, count=page.count)
    return success_response(data, status.HTTP_200_OK, **page.meta())


@router.post("", response_model=ApiResponse[Image], status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    service: ImageService = Depends(get_image_service),
) -> JSONResponse:
    """Upload an image supplied as the multipart part ``file``."""

    if file is None:
        return responses.bad_request("No file provided")

    try:
        failure = service.check_upload(file.content_type, file.size)
        if failure is not None:
            return failure_response(failure)

        # one byte past the limit is enough to reject uploads without a declared size
        content = await file.read(MAX_FILE_SIZE + 1)
        result = await service.upload(file.filename, file.content_type, content)
    except StorageError as exc:
        logger.error("Image upload failed for %s: %s", file.filename, exc)
        return responses.internal_server_error(str(exc))
    finally:
        await file.close()

    if isinstance(result, Failure):
        return failure_response(result)
    return responses.created(result)


@router.delete("/{image_id}", response_model=ApiResponse[ImageDeletedData])
async def delete_image(image_id: str, service: ImageService = Depends(get_image_service)) -> JSONResponse:
    try:
        result = await service.delete(image_id)
    except StorageError as exc:
        logger.error("Image deletion failed for id=%s: %s", image_id, exc)
        return responses.internal_server_error(str(exc))

    if isinstance(result, Failure):
        return failure_response(result)
    return responses.ok(ImageDeletedData(message="Image deleted successfully", image=result))
