"""On-disk persistence and metadata inspection for uploaded images."""

from __future__ import annotations

import io
import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from gallery_api.core.errors import StorageError

logger = logging.getLogger(__name__)

_FILENAME_SANITISER = re.compile(r"[^A-Za-z0-9.-]")
_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_RANDOM_SUFFIX_LENGTH = 11


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with ``_``."""

    return _FILENAME_SANITISER.sub("_", filename or "")


def generate_filename(original_filename: str) -> str:
    """Return ``<ms timestamp>-<base36 suffix><extension of original>``."""

    extension = os.path.splitext(original_filename)[1]
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_RANDOM_SUFFIX_LENGTH))
    return f"{timestamp}-{suffix}{extension}"


def read_dimensions(content: bytes) -> Tuple[int, int]:
    """Decode the image header and return ``(width, height)``."""

    try:
        with Image.open(io.BytesIO(content)) as img:
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise StorageError(f"Unable to read image metadata: {exc}") from exc
    return int(width or 0), int(height or 0)


class ImageFileStorage:
    """Stores image bytes under a single upload directory."""

    def __init__(self, directory: os.PathLike[str] | str, url_prefix: str) -> None:
        self._directory = Path(directory)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to create upload directory: {exc}") from exc

    def path_for(self, filename: str) -> Path:
        # only the final component is honoured so records cannot escape the directory
        return self._directory / Path(filename).name

    def url_for(self, filename: str) -> str:
        return f"{self._url_prefix}/{filename}"

    def write(self, filename: str, content: bytes) -> Path:
        self.ensure_directory()
        path = self.path_for(filename)
        try:
            path.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Unable to write image file: {exc}") from exc
        logger.info("Stored image file %s (%d bytes)", path, len(content))
        return path

    def delete(self, filename: str) -> bool:
        """Remove the stored file; returns ``False`` when it was already gone."""

        path = self.path_for(filename)
        if not path.exists():
            logger.warning("Image file %s already missing; skipping removal", path)
            return False
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to delete image file: {exc}") from exc
        return True


__all__ = ["ImageFileStorage", "generate_filename", "read_dimensions", "sanitize_filename"]
