"""Health and validation handler tests."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db import session as db_session
from app.db.base import Base
from app.main import app


def test_health_and_payload_validation(tmp_path: Path, monkeypatch) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'root.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=engine))

    with TestClient(app) as client:
        health = client.get("/api/health")
        malformed = client.post("/api/orders/commit", json={"items": "not-a-list"})

    assert health.json() == {"ok": True}
    assert malformed.status_code == 400
    assert malformed.json()["detail"]["error"] == "INVALID_PAYLOAD"
