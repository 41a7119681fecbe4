"""Pydantic models used by the user endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A user record as stored and returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Store assigned identifier")
    name: str = Field(..., min_length=1, description="Display name, trimmed")
    email: str = Field(..., min_length=1, description="Unique email address, trimmed")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 creation timestamp")


class UserIn(BaseModel):
    """Body accepted by ``POST /api/users``; PUT and PATCH accept any subset."""

    name: Optional[str] = None
    email: Optional[str] = None


class UserListData(BaseModel):
    users: List[User] = Field(default_factory=list)
    total: int = Field(..., description="Number of users in the store")
    count: int = Field(..., description="Number of users in this page")


class UserDeletedData(BaseModel):
    message: str
    user: User
