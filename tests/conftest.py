"""Shared fixtures for the image storage tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from controllers.image_controller import ImageController
from dal.image_dal import ImageDAL
from main import create_app
from services.blob_store import BlobStore
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import Settings


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    """Upload directory that does not exist yet.

    Returns:
        Nested path under the pytest temporary directory.
    """
    return tmp_path / "storage" / "uploads"


@pytest.fixture
def db_initializer(tmp_path: Path) -> AsyncDatabaseInitializer:
    """Database handle backed by a fresh SQLite file."""
    return AsyncDatabaseInitializer(tmp_path / "db" / "app.db")


@pytest.fixture
def image_dal(db_initializer: AsyncDatabaseInitializer) -> ImageDAL:
    return ImageDAL(db_initializer)


@pytest.fixture
def blob_store(upload_root: Path) -> BlobStore:
    return BlobStore(upload_root)


@pytest.fixture
def controller(image_dal: ImageDAL, blob_store: BlobStore) -> ImageController:
    return ImageController(image_dal, blob_store)


@pytest.fixture
def settings(tmp_path: Path, upload_root: Path) -> Settings:
    return Settings(database_dir=tmp_path / "db", upload_dir=upload_root)


@pytest.fixture
def client(settings: Settings):
    """HTTP client for an app whose lifespan has run.

    Yields:
        FastAPI TestClient bound to a temporary database and upload root.
    """
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def png_bytes() -> bytes:
    """Ten bytes standing in for a small PNG upload."""
    return b"\x89PNG\r\n\x1a\n\x00\x01"
