"""No-service (blackout) day model."""

from datetime import date as dt_date

from sqlalchemy import Date, Enum
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

BLACKOUT_SLOTS = ("BOTH", "LUNCH", "DINNER")


class Blackout(Base):
    """A date, optionally limited to one slot, on which no meals are offered."""

    __tablename__ = "blackout"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt_date] = mapped_column(Date, nullable=False)
    slot: Mapped[str] = mapped_column(Enum(*BLACKOUT_SLOTS, name="blackout_slot", native_enum=False), nullable=False)
