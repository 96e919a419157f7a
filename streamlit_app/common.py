"""Shared DB helpers for the Streamlit operator panels."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.db import session as db_session
from app.db.base import Base
from app.db.migrations import apply_migrations
from app.db.seed import ensure_policy_row

Base.metadata.create_all(bind=db_session.engine)
apply_migrations(db_session.engine)
with db_session.SessionLocal() as _bootstrap:
    ensure_policy_row(_bootstrap)


def get_session() -> Session:
    return db_session.SessionLocal()


def now_string() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")


SLOT_LABELS = {"LUNCH": "점심", "DINNER": "저녁"}
