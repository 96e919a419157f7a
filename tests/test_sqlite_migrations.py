"""Tests for versioned SQLite schema migrations."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.db import session as db_session
from app.db.base import Base
from app.db.migrations import LATEST_SCHEMA_VERSION, apply_migrations, get_schema_version
from app.main import app


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _create_legacy_schema(engine: Engine) -> None:
    """Tables as the earlier app created them: TEXT dates, '' for cleared values, no unique selection index."""
    with engine.begin() as connection:
        connection.execute(
            text(
                """
                CREATE TABLE students (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    code TEXT UNIQUE NOT NULL,
                    name TEXT NOT NULL,
                    phone TEXT,
                    parent_phone TEXT,
                    allowed_weekdays TEXT,
                    start_date TEXT,
                    end_date TEXT,
                    price_override INTEGER
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE policy (
                    id INTEGER PRIMARY KEY CHECK (id=1),
                    base_price INTEGER DEFAULT 9000,
                    allowed_weekdays TEXT DEFAULT 'MON,TUE,WED,THU,FRI',
                    start_date TEXT,
                    end_date TEXT
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE orders (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    student_id INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    slot TEXT NOT NULL,
                    price INTEGER NOT NULL,
                    status TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(student_id) REFERENCES students(id) ON DELETE CASCADE
                )
                """
            )
        )
        connection.execute(
            text(
                "INSERT INTO students (id, code, name, allowed_weekdays, start_date, end_date, price_override) "
                "VALUES (1, 'k1', 'Kim', '', '', '', '')"
            )
        )
        connection.execute(
            text(
                "INSERT INTO policy (id, base_price, allowed_weekdays, start_date, end_date) "
                "VALUES (1, 9000, 'MON,TUE,WED,THU,FRI', '', '')"
            )
        )
        for order_id, status in ((1, "PAID"), (2, "SELECTED"), (3, "SELECTED")):
            connection.execute(
                text(
                    "INSERT INTO orders (id, student_id, date, slot, price, status, created_at) "
                    "VALUES (:id, 1, '2025-09-01', 'LUNCH', 9000, :status, '2025-08-30T10:00:00.000Z')"
                ),
                {"id": order_id, "status": status},
            )


def _column_names(engine: Engine, table_name: str) -> set[str]:
    with engine.connect() as connection:
        rows = connection.execute(text(f"PRAGMA table_info({table_name})")).mappings().all()
    return {row["name"] for row in rows}


def test_legacy_database_is_upgraded_once(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "legacy.db")
    _create_legacy_schema(engine)

    assert apply_migrations(engine) == LATEST_SCHEMA_VERSION

    assert "sms_extra_text" in _column_names(engine, "policy")
    assert "updated_at" in _column_names(engine, "orders")
    with engine.connect() as connection:
        remaining = connection.execute(text("SELECT id, status FROM orders")).all()
        indexes = {row[1] for row in connection.execute(text("PRAGMA index_list(orders)")).all()}
        assert get_schema_version(connection) == LATEST_SCHEMA_VERSION
    assert [tuple(row) for row in remaining] == [(1, "PAID")]
    assert {"uq_orders_student_date_slot", "idx_orders_date_slot", "idx_orders_student_date"} <= indexes

    with engine.connect() as connection:
        policy_dates = connection.execute(text("SELECT start_date, end_date FROM policy")).one()
        student = connection.execute(text("SELECT start_date, end_date, price_override FROM students")).one()
        created_at = connection.execute(text("SELECT created_at FROM orders")).scalar_one()
    assert tuple(policy_dates) == (None, None)
    assert tuple(student) == (None, None, None)
    assert created_at == "2025-08-30T10:00:00.000+00:00"

    calls = []
    rerun = apply_migrations(engine, [(LATEST_SCHEMA_VERSION, "already_applied", calls.append)])
    assert rerun == LATEST_SCHEMA_VERSION
    assert calls == []


def test_new_migration_runs_after_existing_version(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "next.db")
    Base.metadata.create_all(bind=engine)
    apply_migrations(engine)

    seen = []
    version = apply_migrations(engine, [(LATEST_SCHEMA_VERSION + 1, "next_step", seen.append)])

    assert version == LATEST_SCHEMA_VERSION + 1
    assert len(seen) == 1


def test_startup_migrates_legacy_database(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "startup.db")
    _create_legacy_schema(engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with TestClient(app) as client:
        assert client.get("/api/health").json() == {"ok": True}
        active = client.get("/api/policy/active", params={"code": "k1"})
        history = client.get("/api/student/orders/k1")

    assert active.status_code == 200
    assert active.json()["sms_extra_text"] is None
    assert active.json()["start_date"] is None
    assert history.status_code == 200
    with engine.connect() as connection:
        assert connection.execute(text("SELECT COUNT(*) FROM orders")).scalar_one() == 1
