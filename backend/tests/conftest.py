"""Shared test fixtures and configuration for backend tests."""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gallery.config import AppConfig, StorageSettings
from gallery.files.service import FileStorageService
from gallery.main import create_app


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """A fresh upload directory for each test."""
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir: Path):
    """Install a FileStorageService singleton bound to the temp directory."""
    FileStorageService.reset_instance()
    service = FileStorageService.get_instance(upload_dir)
    yield service
    FileStorageService.reset_instance()


@pytest.fixture
def api_client(upload_dir: Path, storage: FileStorageService) -> TestClient:
    """Provide a TestClient for an app serving the temp upload directory."""
    config = AppConfig(storage=StorageSettings(upload_dir=str(upload_dir)))
    return TestClient(create_app(config))
