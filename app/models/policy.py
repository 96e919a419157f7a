"""Global ordering policy model."""

from datetime import date

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

POLICY_ROW_ID: int = 1
DEFAULT_ALLOWED_WEEKDAYS: str = "MON,TUE,WED,THU,FRI"


class Policy(Base):
    """Singleton policy row (id=1)."""

    __tablename__ = "policy"
    __table_args__ = (CheckConstraint("id = 1", name="ck_policy_singleton"),)

    id: Mapped[int] = mapped_column(primary_key=True, default=POLICY_ROW_ID)
    base_price: Mapped[int] = mapped_column(Integer, nullable=False, default=9000)
    allowed_weekdays: Mapped[str] = mapped_column(String(64), nullable=False, default=DEFAULT_ALLOWED_WEEKDAYS)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sms_extra_text: Mapped[str | None] = mapped_column(Text, nullable=True)
