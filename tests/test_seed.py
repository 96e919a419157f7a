"""Database seed behavior tests."""

from pathlib import Path

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.base import Base
from app.db.seed import ensure_policy_row
from app.models import Policy


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_ensure_policy_row_creates_defaults_once(tmp_path: Path, monkeypatch) -> None:
    """The singleton policy row is created with defaults and reused afterwards."""
    engine = _build_test_engine(tmp_path / "seed_policy.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(settings, "default_base_price", 8500)

    with testing_session_local() as session:
        created = ensure_policy_row(session)
        created.base_price = 10000
        session.commit()

    with testing_session_local() as session:
        again = ensure_policy_row(session)
        count = session.scalar(select(func.count()).select_from(Policy))

    assert count == 1
    assert again.id == 1
    assert again.base_price == 10000
    assert again.allowed_weekdays == "MON,TUE,WED,THU,FRI"


def test_ensure_policy_row_uses_configured_default_price(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "seed_price.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(settings, "default_base_price", 7000)

    with testing_session_local() as session:
        assert ensure_policy_row(session).base_price == 7000
