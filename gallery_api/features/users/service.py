from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from gallery_api.core.errors import Failure
from gallery_api.core.pagination import Page, paginate
from gallery_api.core.store import KeyedStore
from gallery_api.core.utils import utc_timestamp
from gallery_api.core.validation import non_empty_string, required_fields, valid_email

from .schemas import User

logger = logging.getLogger(__name__)

DEMO_USER = {"name": "John Doe", "email": "john@example.com"}

UserResult = Union[User, Failure]


def _missing_id(user_id: Optional[str]) -> bool:
    return not user_id or not user_id.strip()


class UserService:
    """CRUD over the in-memory user store."""

    def __init__(self, store: Optional[KeyedStore[User]] = None) -> None:
        self._store: KeyedStore[User] = store if store is not None else KeyedStore()

    @property
    def store(self) -> KeyedStore[User]:
        return self._store

    def seed_demo_user(self) -> None:
        with self._store.locked():
            if self._store.find(lambda u: u.email == DEMO_USER["email"]) is None:
                self._store.add(
                    User(id=self._store.next_id(), created_at=utc_timestamp(), **DEMO_USER)
                )

    def list_users(self, limit: Optional[str] = None, offset: Optional[str] = None) -> Page[User]:
        return paginate(self._store.get_all(), limit=limit, offset=offset)

    def create_user(self, body: Any) -> UserResult:
        checked = required_fields(body, ["name", "email"])
        if not checked.ok:
            return Failure.bad_request(checked.error.message)

        name = non_empty_string(body["name"], "name")
        if not name.ok:
            return Failure.bad_request(name.error.message)
        email = valid_email(body["email"], "email")
        if not email.ok:
            return Failure.bad_request(email.error.message)

        with self._store.locked():
            if self._store.find(lambda u: u.email == email.value) is not None:
                return Failure.conflict("User with this email already exists")

            user = User(
                id=self._store.next_id(),
                name=name.value,
                email=email.value,
                created_at=utc_timestamp(),
            )
            self._store.add(user)

        logger.info("Created user id=%s", user.id)
        return user

    def get_user(self, user_id: Optional[str]) -> UserResult:
        if _missing_id(user_id):
            return Failure.bad_request("User ID is required")

        user = self._store.get_by_id(user_id)
        if user is None:
            return Failure.not_found("User not found")
        return user

    def update_user(self, user_id: Optional[str], body: Any) -> UserResult:
        """Apply whichever of ``name``/``email`` the body carries.

        Used for both PUT and PATCH; absent fields keep their current value.
        """

        if _missing_id(user_id):
            return Failure.bad_request("User ID is required")

        with self._store.locked():
            existing = self._store.get_by_id(user_id)
            if existing is None:
                return Failure.not_found("User not found")

            if not isinstance(body, Mapping):
                return Failure.bad_request("Request body must be an object")

            updates: Dict[str, str] = {}
            if "name" in body:
                name = non_empty_string(body["name"], "name")
                if not name.ok:
                    return Failure.bad_request(name.error.message)
                updates["name"] = name.value

            if "email" in body:
                email = valid_email(body["email"], "email")
                if not email.ok:
                    return Failure.bad_request(email.error.message)
                taken = self._store.find(lambda u: u.email == email.value and u.id != user_id)
                if taken is not None:
                    return Failure.conflict("Email is already taken by another user")
                updates["email"] = email.value

            updated = existing.model_copy(update=updates)
            self._store.replace(user_id, updated)

        return updated

    def delete_user(self, user_id: Optional[str]) -> UserResult:
        if _missing_id(user_id):
            return Failure.bad_request("User ID is required")

        with self._store.locked():
            user = self._store.get_by_id(user_id)
            if user is None:
                return Failure.not_found("User not found")
            self._store.remove(user_id)

        logger.info("Deleted user id=%s", user_id)
        return user


__all__ = ["DEMO_USER", "UserService"]
