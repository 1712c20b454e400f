"""
Pytest configuration and fixtures
"""

import io
import os
import tempfile
from pathlib import Path

# Static file serving binds its directory at import time
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="asset-ingest-"))

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from asset_ingest.config import settings
from asset_ingest.main import app
from asset_ingest.services.file_storage import AssetStorage


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point the upload directory at a per-test temporary path."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(upload_dir):
    """FastAPI test client fixture writing into a temporary upload directory"""
    return TestClient(app)


@pytest.fixture
def storage(upload_dir):
    """AssetStorage bound to the temporary upload directory."""
    return AssetStorage(upload_dir=str(upload_dir))


def make_image(size=(800, 600), fmt="PNG", mode="RGB", color=(200, 40, 40)) -> bytes:
    """Encode a solid-colour image with Pillow."""
    if mode == "RGBA" and len(color) == 3:
        color = color + (128,)
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def stored_files(path: Path) -> list:
    """All regular files below path (empty when path does not exist)."""
    if not path.exists():
        return []
    return [p for p in path.rglob("*") if p.is_file()]


@pytest.fixture
def png_bytes():
    """800x600 opaque PNG."""
    return make_image()


@pytest.fixture
def lottie_bytes():
    """Minimal Lottie animation document."""
    return (
        b'{"v": 5.5, "fr": 30, "ip": 0, "op": 90, "w": 500, "h": 500,'
        b' "nm": "spinner", "layers": [{"ty": 4, "nm": "shape"}]}'
    )


@pytest.fixture
def svg_bytes():
    """SVG icon with a viewBox and no explicit dimensions."""
    return (
        b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 48">'
        b'<rect width="10" height="10" stroke-width="2"/></svg>'
    )


@pytest.fixture
def image_factory():
    """Callable producing encoded test images."""
    return make_image


@pytest.fixture
def list_stored():
    """Callable listing regular files stored below a directory."""
    return stored_files
