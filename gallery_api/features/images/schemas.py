"""Pydantic models used by the image endpoints."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Image(BaseModel):
    """Metadata describing an uploaded image."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Store assigned identifier")
    filename: str = Field(..., description="Generated name of the stored file")
    url: str = Field(..., description="Public URL that serves the stored file")
    size: int = Field(..., ge=0, description="Size of the upload in bytes")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")
    uploaded_at: str = Field(..., alias="uploadedAt", description="ISO-8601 upload timestamp")


class ImageListData(BaseModel):
    images: List[Image] = Field(default_factory=list)
    total: int
    count: int


class ImageDeletedData(BaseModel):
    message: str
    image: Image
