from __future__ import annotations

from fastapi import Request

from .service import ImageService


def get_image_service(request: Request) -> ImageService:
    """Return the image service bound to the running application."""

    return request.app.state.image_service
