from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from gallery_api.config import Settings
from gallery_api.main import create_app


def make_image_bytes(width: int = 32, height: int = 16, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture()
def settings(tmp_path):
    return Settings(public_dir=tmp_path / "public", seed_users=False, cors_origins="http://localhost:3000")


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def upload_dir(settings):
    return settings.upload_dir


@pytest.fixture()
def png_bytes():
    return make_image_bytes()
