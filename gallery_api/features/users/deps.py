from __future__ import annotations

from fastapi import Request

from .service import UserService


def get_user_service(request: Request) -> UserService:
    """Return the user service bound to the running application."""

    return request.app.state.user_service
