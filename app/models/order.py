"""Order ledger model: one row per student, date and meal slot."""

from datetime import date as dt_date, datetime, timezone

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

ORDER_SLOTS = ("LUNCH", "DINNER")
ORDER_STATUS_VALUES = ("SELECTED", "PAID")


class Order(Base):
    """A student's meal selection for one slot on one date."""

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("student_id", "date", "slot", name="uq_orders_student_date_slot"),
        Index("idx_orders_date_slot", "date", "slot", "status"),
        Index("idx_orders_student_date", "student_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[dt_date] = mapped_column(Date, nullable=False)
    slot: Mapped[str] = mapped_column(Enum(*ORDER_SLOTS, name="order_slot", native_enum=False), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        Enum(*ORDER_STATUS_VALUES, name="order_status", native_enum=False),
        nullable=False,
        default="SELECTED",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    student: Mapped["Student"] = relationship(back_populates="orders")
