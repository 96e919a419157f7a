"""Admin session authentication tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.security import get_password_hash, verify_admin_credentials
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
    engine = _build_test_engine(tmp_path / "test_admin_auth.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "admin_user", "admin")
    monkeypatch.setattr(settings, "admin_pass", "admin-pass")
    monkeypatch.setattr(settings, "admin_pass_hash", "")

    with TestClient(app) as test_client:
        yield test_client


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/api/admin/students"),
        ("get", "/api/admin/policy"),
        ("get", "/api/admin/orders"),
        ("post", "/api/admin/reset-orders"),
        ("get", "/api/admin/print?date=2025-09-01"),
        ("get", "/api/admin/menu-images"),
    ],
)
def test_admin_routes_require_session(client: TestClient, method: str, path: str) -> None:
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json()["detail"] == "UNAUTHORIZED"


def test_login_me_logout_cycle(client: TestClient) -> None:
    assert client.get("/api/admin/me").json() == {"authenticated": False, "username": None}

    bad = client.post("/api/admin/login", json={"username": "admin", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "INVALID_CREDENTIALS"

    good = client.post("/api/admin/login", json={"username": "admin", "password": "admin-pass"})
    assert good.status_code == 200
    assert settings.session_cookie_name in good.cookies
    assert client.get("/api/admin/me").json() == {"authenticated": True, "username": "admin"}
    assert client.get("/api/admin/students").status_code == 200

    client.post("/api/admin/logout")
    assert client.get("/api/admin/me").json()["authenticated"] is False
    assert client.get("/api/admin/students").status_code == 401


def test_reset_orders_requires_confirmation(client: TestClient) -> None:
    client.post("/api/admin/login", json={"username": "admin", "password": "admin-pass"})
    client.post("/api/admin/students", json={"name": "Kim", "code": "k1"})
    client.post("/api/orders/commit", json={"code": "k1", "items": [{"date": "2025-09-01", "slot": "LUNCH"}]})

    refused = client.post("/api/admin/reset-orders", json={})
    assert refused.status_code == 400
    assert refused.json()["detail"]["error"] == "CONFIRM_REQUIRED"

    done = client.post("/api/admin/reset-orders", json={"confirm": True})
    assert done.status_code == 200
    assert done.json()["deleted"] == 1


@pytest.mark.parametrize("confirm", ["yes", "true", "on", 1])
def test_reset_orders_requires_literal_true(client: TestClient, confirm) -> None:
    client.post("/api/admin/login", json={"username": "admin", "password": "admin-pass"})
    client.post("/api/admin/students", json={"name": "Kim", "code": "k1"})
    client.post("/api/orders/commit", json={"code": "k1", "items": [{"date": "2025-09-01", "slot": "LUNCH"}]})

    refused = client.post("/api/admin/reset-orders", json={"confirm": confirm})

    assert refused.status_code == 400
    assert len(client.get("/api/admin/orders").json()["rows"]) == 1


def test_hashed_admin_password_takes_precedence(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_user", "admin")
    monkeypatch.setattr(settings, "admin_pass", "plain")
    monkeypatch.setattr(settings, "admin_pass_hash", get_password_hash("hashed"))

    assert verify_admin_credentials("admin", "hashed")
    assert not verify_admin_credentials("admin", "plain")
    assert not verify_admin_credentials("other", "hashed")


def test_login_disabled_without_configured_password(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_pass", "")
    monkeypatch.setattr(settings, "admin_pass_hash", "")

    assert not verify_admin_credentials(settings.admin_user, "")
