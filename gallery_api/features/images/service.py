from __future__ import annotations

import logging
from typing import Optional, Union

from fastapi.concurrency import run_in_threadpool

from gallery_api.core.errors import Failure
from gallery_api.core.pagination import Page, paginate
from gallery_api.core.store import KeyedStore
from gallery_api.core.utils import utc_timestamp

from .schemas import Image
from .storage import ImageFileStorage, generate_filename, read_dimensions, sanitize_filename

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
ALLOWED_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")

ImageResult = Union[Image, Failure]


class ImageService:
    """Validates uploads, persists their bytes and tracks their metadata.

    :class:`~gallery_api.core.errors.StorageError` escapes from ``upload`` and
    ``delete`` when decoding or disk access fails; every other outcome is a
    returned :class:`Image` or :class:`Failure`.
    """

    def __init__(self, files: ImageFileStorage, store: Optional[KeyedStore[Image]] = None) -> None:
        self._files = files
        self._store: KeyedStore[Image] = store if store is not None else KeyedStore()

    @property
    def store(self) -> KeyedStore[Image]:
        return self._store

    @property
    def files(self) -> ImageFileStorage:
        return self._files

    def list_images(self, limit: Optional[str] = None, offset: Optional[str] = None) -> Page[Image]:
        return paginate(self._store.get_all(), limit=limit, offset=offset)

    def check_upload(self, content_type: Optional[str], size: Optional[int]) -> Optional[Failure]:
        """Reject a disallowed type or a declared size over the limit, before any bytes are read."""

        if content_type not in ALLOWED_MIME_TYPES:
            return Failure.bad_request(f"Invalid file type. Allowed types: {', '.join(ALLOWED_MIME_TYPES)}")

        if size is not None and size > MAX_FILE_SIZE:
            return Failure.bad_request(f"File size exceeds maximum of {MAX_FILE_SIZE // 1024 // 1024}MB")
        return None

    async def upload(self, original_filename: Optional[str], content_type: Optional[str], content: bytes) -> ImageResult:
        failure = self.check_upload(content_type, len(content))
        if failure is not None:
            return failure

        filename = generate_filename(sanitize_filename(original_filename or ""))

        width, height = await run_in_threadpool(read_dimensions, content)
        if width == 0 or height == 0:
            return Failure.bad_request("Invalid image dimensions")

        await run_in_threadpool(self._files.write, filename, content)

        with self._store.locked():
            image = Image(
                id=self._store.next_id(),
                filename=filename,
                url=self._files.url_for(filename),
                size=len(content),
                width=width,
                height=height,
                uploaded_at=utc_timestamp(),
            )
            self._store.add(image)

        logger.info("Uploaded image id=%s filename=%s %dx%d", image.id, filename, width, height)
        return image

    async def delete(self, image_id: str) -> ImageResult:
        image = self._store.get_by_id(image_id)
        if image is None:
            return Failure.not_found("Image not found")

        await run_in_threadpool(self._files.delete, image.filename)
        self._store.remove(image_id)

        logger.info("Deleted image id=%s filename=%s", image_id, image.filename)
        return image


__all__ = ["ALLOWED_MIME_TYPES", "ImageService", "MAX_FILE_SIZE"]
