"""Liveness endpoint."""
from __future__ import annotations

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gallery_api.core.responses import success_response

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", summary="Report process liveness and store sizes")
def health(request: Request) -> JSONResponse:
    state = request.app.state
    started = getattr(state, "started_at", None)
    return success_response(
        {
            "status": "ok",
            "uptime_seconds": round(time.monotonic() - started, 3) if started is not None else None,
            "stores": {
                "users": state.user_service.store.get_count(),
                "images": state.image_service.store.get_count(),
            },
        }
    )
