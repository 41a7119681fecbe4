"""Root ``/api`` endpoint describing the service."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gallery_api import __version__
from gallery_api.core.responses import success_response

router = APIRouter(tags=["Index"])


@router.get("", summary="Describe the API and its endpoints")
async def api_index(request: Request) -> JSONResponse:
    base_url = str(request.base_url).rstrip("/")
    return success_response(
        {
            "name": "API",
            "version": __version__,
            "status": "operational",
            "endpoints": {
                "root": f"{base_url}/api",
                "users": f"{base_url}/api/users",
                "userById": f"{base_url}/api/users/[id]",
                "images": f"{base_url}/api/images",
                "imageById": f"{base_url}/api/images/[id]",
            },
            "documentation": {
                "description": "RESTful API for managing resources",
                "methods": ["GET", "POST", "PUT", "DELETE", "PATCH"],
            },
        },
        path="/api",
    )
