"""Menu image upload and listing tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db import session as db_session
from app.db.base import Base
from app.main import app


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def client(tmp_path: Path, monkeypatch):
    engine = _build_test_engine(tmp_path / "test_menu_images.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "admin_user", "admin")
    monkeypatch.setattr(settings, "admin_pass", "admin-pass")
    monkeypatch.setattr(settings, "admin_pass_hash", "")

    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient) -> None:
    assert client.post("/api/admin/login", json={"username": "admin", "password": "admin-pass"}).status_code == 200


def test_upload_lists_latest_five_publicly(client: TestClient, tmp_path: Path) -> None:
    _login(client)
    uploaded = []
    for index in range(6):
        response = client.post(
            "/api/admin/menu-images",
            files={"image": (f"menu{index}.PNG", b"\x89PNG fake " + bytes([index]), "image/png")},
        )
        assert response.status_code == 200
        uploaded.append(response.json())

    assert all(item["url"].startswith("/uploads/") and item["url"].endswith(".png") for item in uploaded)
    stored = tmp_path / "uploads" / uploaded[0]["url"].rsplit("/", 1)[1]
    assert stored.read_bytes() == b"\x89PNG fake \x00"

    client.post("/api/admin/logout")
    public = client.get("/api/menu-images").json()
    assert [item["id"] for item in public] == [item["id"] for item in reversed(uploaded)][:5]


def test_delete_removes_file_and_is_idempotent(client: TestClient, tmp_path: Path) -> None:
    _login(client)
    image = client.post("/api/admin/menu-images", files={"image": ("menu.jpg", b"jpeg-bytes", "image/jpeg")}).json()
    stored = tmp_path / "uploads" / image["url"].rsplit("/", 1)[1]
    assert stored.exists()

    assert client.delete(f"/api/admin/menu-images/{image['id']}").json() == {"ok": True}
    assert not stored.exists()
    assert client.get("/api/admin/menu-images").json() == []
    assert client.delete(f"/api/admin/menu-images/{image['id']}").status_code == 200


def test_upload_requires_file(client: TestClient) -> None:
    _login(client)

    missing = client.post("/api/admin/menu-images", data={"other": "x"})
    empty = client.post("/api/admin/menu-images", files={"image": ("menu.png", b"", "image/png")})

    assert missing.status_code == 400
    assert empty.status_code == 400
    assert empty.json()["detail"]["error"] == "FILE_REQUIRED"
