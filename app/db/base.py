"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import blackout as _blackout  # noqa: E402,F401
from app.models import menu_image as _menu_image  # noqa: E402,F401
from app.models import order as _order  # noqa: E402,F401
from app.models import policy as _policy  # noqa: E402,F401
from app.models import student as _student  # noqa: E402,F401
