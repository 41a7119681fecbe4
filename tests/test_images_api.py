from __future__ import annotations

import re

import pytest
from starlette.datastructures import UploadFile

from gallery_api.features.images.service import MAX_FILE_SIZE

from .conftest import make_image_bytes

STORED_NAME = re.compile(r"^\d{13}-[0-9a-z]{11}\.png$")


def _upload(client, content, filename="photo.png", content_type="image/png"):
    return client.post("/api/images", files={"file": (filename, content, content_type)})


def _stored_files(upload_dir):
    if not upload_dir.exists():
        return []
    return sorted(p.name for p in upload_dir.iterdir())


def test_upload_png_records_dimensions(client, upload_dir):
    content = make_image_bytes(40, 25)

    response = _upload(client, content, filename="holiday photo!.png")

    assert response.status_code == 201
    image = response.json()["data"]
    assert image["id"] == "1"
    assert image["width"] == 40
    assert image["height"] == 25
    assert image["size"] == len(content)
    assert STORED_NAME.match(image["filename"])
    assert image["url"] == f"/uploads/images/{image['filename']}"
    assert image["uploadedAt"].endswith("Z")
    assert (upload_dir / image["filename"]).read_bytes() == content


@pytest.mark.parametrize("fmt, content_type", [("JPEG", "image/jpeg"), ("GIF", "image/gif"), ("WEBP", "image/webp")])
def test_upload_other_allowed_formats(client, fmt, content_type):
    response = _upload(client, make_image_bytes(8, 6, fmt), filename=f"pic.{fmt.lower()}", content_type=content_type)

    assert response.status_code == 201
    assert (response.json()["data"]["width"], response.json()["data"]["height"]) == (8, 6)


def test_upload_without_file_is_rejected(client):
    response = client.post("/api/images", data={"other": "value"})

    assert response.status_code == 400
    assert response.json()["error"] == {"message": "No file provided", "code": "BAD_REQUEST"}


def test_upload_rejects_disallowed_type(client, upload_dir):
    response = _upload(client, b"hello", filename="notes.txt", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["error"]["message"] == (
        "Invalid file type. Allowed types: image/jpeg, image/jpg, image/png, image/gif, image/webp"
    )
    assert client.get("/api/images").json()["data"]["total"] == 0
    assert _stored_files(upload_dir) == []


def test_upload_rejects_oversized_file_without_writing(client, upload_dir):
    response = _upload(client, b"\x00" * (MAX_FILE_SIZE + 1))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "File size exceeds maximum of 5MB"
    assert _stored_files(upload_dir) == []
    assert client.get("/api/images").json()["data"]["total"] == 0


def test_oversized_upload_is_rejected_before_reading_body(client, monkeypatch):
    reads = []
    original_read = UploadFile.read

    async def _recording_read(self, size=-1):
        reads.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(UploadFile, "read", _recording_read)

    response = _upload(client, b"\x00" * (4 * MAX_FILE_SIZE))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "File size exceeds maximum of 5MB"
    assert reads == []


def test_upload_reads_at_most_one_byte_past_limit(client, monkeypatch, png_bytes):
    reads = []
    original_read = UploadFile.read

    async def _recording_read(self, size=-1):
        reads.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(UploadFile, "read", _recording_read)

    assert _upload(client, png_bytes).status_code == 201
    assert reads == [MAX_FILE_SIZE + 1]


def test_upload_rejects_zero_dimensions(client, upload_dir, monkeypatch, png_bytes):
    monkeypatch.setattr("gallery_api.features.images.service.read_dimensions", lambda content: (0, 12))

    response = _upload(client, png_bytes)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid image dimensions"
    assert _stored_files(upload_dir) == []


def test_undecodable_image_is_internal_error(client, upload_dir):
    response = _upload(client, b"definitely not a png")

    assert response.status_code == 500
    payload = response.json()
    assert payload["error"]["code"] == "INTERNAL_SERVER_ERROR"
    assert payload["error"]["message"].startswith("Unable to read image metadata")
    assert _stored_files(upload_dir) == []
    assert client.get("/api/images").json()["data"]["total"] == 0


def test_write_failure_is_internal_error(client, monkeypatch, png_bytes):
    def _boom(self, filename, content):
        from gallery_api.core.errors import StorageError

        raise StorageError("Unable to write image file: disk full")

    monkeypatch.setattr("gallery_api.features.images.storage.ImageFileStorage.write", _boom)

    response = _upload(client, png_bytes)

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "Unable to write image file: disk full"
    assert client.get("/api/images").json()["data"]["total"] == 0


def test_upload_then_list_round_trip(client):
    uploaded = _upload(client, make_image_bytes(12, 34)).json()["data"]

    listing = client.get("/api/images").json()["data"]

    matches = [img for img in listing["images"] if img["id"] == uploaded["id"]]
    assert len(matches) == 1
    assert (matches[0]["size"], matches[0]["width"], matches[0]["height"]) == (
        uploaded["size"],
        12,
        34,
    )


def test_list_images_pagination(client):
    ids = [_upload(client, make_image_bytes(5 + i, 5)).json()["data"]["id"] for i in range(4)]

    payload = client.get("/api/images", params={"limit": "2", "offset": "2"}).json()

    assert [img["id"] for img in payload["data"]["images"]] == ids[2:4]
    assert payload["data"]["total"] == 4
    assert payload["data"]["count"] == 2
    assert payload["meta"]["pagination"] == {"limit": 2, "offset": 2}


def test_uploaded_file_is_served(client, png_bytes):
    image = _upload(client, png_bytes).json()["data"]

    response = client.get(image["url"])

    assert response.status_code == 200
    assert response.content == png_bytes


def test_delete_image_removes_file_and_record(client, upload_dir, png_bytes):
    image = _upload(client, png_bytes).json()["data"]

    response = client.delete(f"/api/images/{image['id']}")

    assert response.status_code == 200
    assert response.json()["data"] == {"message": "Image deleted successfully", "image": image}
    assert not (upload_dir / image["filename"]).exists()
    assert client.get("/api/images").json()["data"]["total"] == 0


def test_delete_tolerates_missing_file(client, upload_dir, png_bytes):
    image = _upload(client, png_bytes).json()["data"]
    (upload_dir / image["filename"]).unlink()

    response = client.delete(f"/api/images/{image['id']}")

    assert response.status_code == 200
    assert client.get("/api/images").json()["data"]["images"] == []


def test_delete_unknown_image_is_not_found(client):
    response = client.delete("/api/images/42")

    assert response.status_code == 404
    assert response.json()["error"] == {"message": "Image not found", "code": "NOT_FOUND"}
