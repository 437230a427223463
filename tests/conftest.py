"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
"""

import io
from pathlib import Path
from typing import Callable, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.main import app
from app.services.upload_service import UploadService
from app.storage.local_storage import LocalFileStorage
from app.storage.registry import FileRegistry
from app.validation.uploaded_file import UploadedFile


PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


def render_image(fmt: str = "JPEG", size: Tuple[int, int] = (300, 300)) -> bytes:
    """Encode a solid-colour image of ``size`` in ``fmt`` (JPEG, PNG, WEBP)."""
    buf = io.BytesIO()
    Image.new("RGB", size, color=(12, 94, 168)).save(buf, format=fmt)
    return buf.getvalue()


# ── Core client fixture ────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    session-scoped so the app is instantiated once per test run.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def upload_service(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> UploadService:
    """
    A fresh UploadService storing under tmp_path, swapped into the controller
    so API tests never touch the real storage root or share registry state.
    """
    service = UploadService(
        storage=LocalFileStorage(root=tmp_path / "storage"),
        registry=FileRegistry(),
    )
    monkeypatch.setattr("app.api.upload_controller.upload_service", service)
    return service


# ── Sample file fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory: ``image_bytes("PNG", (640, 480))`` → encoded image bytes."""
    return render_image


@pytest.fixture
def pdf_bytes() -> bytes:
    """Minimal content starting with the %PDF signature."""
    return PDF_BYTES


@pytest.fixture
def make_upload(tmp_path: Path) -> Callable[..., UploadedFile]:
    """
    Factory writing ``content`` to disk and describing it as an upload.

    Usage:
        upload = make_upload("photo.jpg", jpeg, "image/jpeg")
    """
    counter = {"n": 0}

    def _make(
        name: str,
        content: bytes,
        mime_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> UploadedFile:
        counter["n"] += 1
        path = tmp_path / f"spool-{counter['n']}"
        path.write_bytes(content)
        upload = UploadedFile.from_path(path, original_name=name, mime_type=mime_type)
        if size is not None:
            upload.size = size
        return upload

    return _make
