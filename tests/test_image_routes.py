"""Integration tests for the HTTP routes."""

import pytest

from utils.errors import BlobIOError

pytestmark = pytest.mark.integration


def _upload(client, name="a.png", content=b"0123456789", content_type="image/png"):
    return client.post("/api/upload", files={"file": (name, content, content_type)})


def test_health_reports_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "db_available": True}


def test_upload_serve_and_delete(client):
    """Full lifecycle of one image through the HTTP surface."""
    response = _upload(client)
    assert response.status_code == 200
    image = response.json()["image"]
    assert image["name"] == "a.png"
    assert image["size"] == 10
    assert image["type"] == "image/png"
    assert image["url"] == image["downloadUrl"]
    assert image["uploadedAt"]

    served = client.get(image["url"])
    assert served.status_code == 200
    assert served.content == b"0123456789"
    assert served.headers["content-type"] == "image/png"
    assert served.headers["content-length"] == "10"
    assert served.headers["cache-control"] == "public, max-age=31536000"

    listed = client.get("/api/images").json()["images"]
    assert [item["id"] for item in listed] == [image["id"]]

    deleted = client.delete(f"/api/images/{image['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}

    assert client.get(image["url"]).status_code == 404
    assert client.get("/api/images").json() == {"images": []}


def test_list_is_newest_first(client):
    first = _upload(client, name="first.png").json()["image"]
    second = _upload(client, name="second.png").json()["image"]

    listed = client.get("/api/images").json()["images"]

    assert [item["id"] for item in listed] == [second["id"], first["id"]]


def test_upload_rejects_non_image(client, upload_root):
    response = _upload(client, name="notes.txt", content=b"hello", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["detail"] == "File must be an image"
    assert list(upload_root.iterdir()) == []
    assert client.get("/api/images").json() == {"images": []}


def test_upload_without_file(client):
    response = client.post("/api/upload", data={"other": "field"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No file provided"


def test_delete_unknown_image(client):
    response = client.delete("/api/images/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Image not found"


def test_unknown_file_does_not_leak_paths(client, upload_root):
    response = client.get("/api/files/missing.png")

    assert response.status_code == 404
    assert str(upload_root) not in response.text


def test_upload_empty_image(client):
    response = _upload(client, name="empty.png", content=b"")

    assert response.status_code == 200
    image = response.json()["image"]
    assert image["size"] == 0
    served = client.get(image["url"])
    assert served.status_code == 200
    assert served.content == b""


def test_upload_keeps_declared_content_type(client):
    image = _upload(client, content_type="image/png; q=1").json()["image"]

    assert image["type"] == "image/png; q=1"
    assert client.get(image["url"]).headers["content-type"] == "image/png; q=1"


def test_unreadable_blob_is_generic_server_error(client, upload_root, monkeypatch):
    """A read failure answers 500 without exposing where the blob lives."""
    image = _upload(client).json()["image"]

    async def failing_read(path):
        raise BlobIOError(f"Failed to read blob at {path}", path=path)

    monkeypatch.setattr(client.app.state.image_controller.blob_store, "read", failing_read)

    response = client.get(image["url"])

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}
    assert str(upload_root) not in response.text


def test_missing_blob_with_record_is_not_found(client, upload_root):
    """A record whose blob vanished answers 404 rather than a server error."""
    image = _upload(client).json()["image"]
    for path in upload_root.iterdir():
        path.unlink()

    assert client.get(image["url"]).status_code == 404
