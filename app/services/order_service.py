"""Order ledger operations: commit, payment marking and cancellation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import delete, or_, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.models import Order, Student
from app.services import order_status
from app.services.errors import ValidationError
from app.services.payment_gateway import PaymentConfirmation, confirm_payment
from app.services.policy_service import MEAL_SLOTS, get_student_by_code, resolve_effective_policy
from app.utils.time import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionEntry:
    date: date
    slot: str
    price: int | None = None


@dataclass(frozen=True)
class CommitResult:
    inserted: int
    skipped_duplicates: int
    skipped_invalid: int


@dataclass(frozen=True)
class PaymentResult:
    receipt: Any
    student_found: bool
    updated: int


def parse_order_date(value: Any, field_name: str = "date") -> date:
    """Parse an ISO calendar date from request data."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid {field_name}: {value!r}", code="INVALID_DATE") from exc


def parse_slot(value: Any) -> str:
    slot = str(value).strip().upper()
    if slot not in MEAL_SLOTS:
        raise ValidationError(f"Invalid slot: {value!r}", code="INVALID_SLOT")
    return slot


def parse_price(value: Any) -> int | None:
    """Parse an optional non-negative whole price; blank means "use the base price"."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid price: {value!r}", code="INVALID_PRICE")
    if isinstance(value, int):
        price = value
    elif isinstance(value, float) and value.is_integer():
        price = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        price = int(value.strip())
    else:
        raise ValidationError(f"Invalid price: {value!r}", code="INVALID_PRICE")
    if price < 0:
        raise ValidationError("price must be >= 0", code="INVALID_PRICE")
    return price


def normalize_selection(raw_items: list[dict[str, Any]]) -> tuple[list[SelectionEntry], int]:
    """Validate raw commit items.

    Items without a date or slot are skipped and counted. Items carrying a
    malformed date, an unknown slot or a price that is not a non-negative
    whole number reject the whole batch.
    """
    entries: list[SelectionEntry] = []
    skipped = 0
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("date") or not raw.get("slot"):
            skipped += 1
            continue
        entries.append(
            SelectionEntry(
                date=parse_order_date(raw["date"]),
                slot=parse_slot(raw["slot"]),
                price=parse_price(raw.get("price")),
            )
        )
    return entries, skipped


def commit_selection(db: Session, code: str, raw_items: list[dict[str, Any]]) -> CommitResult:
    """Record a student's meal selections as SELECTED rows.

    A (student, date, slot) triple that already exists is left untouched:
    neither price nor status of the existing row changes.
    """
    effective = resolve_effective_policy(db, code)
    entries, skipped_invalid = normalize_selection(raw_items)

    now = utc_now()
    inserted = 0
    for entry in entries:
        statement = (
            sqlite_insert(Order)
            .values(
                student_id=effective.student_id,
                date=entry.date,
                slot=entry.slot,
                price=entry.price if entry.price is not None else effective.base_price,
                status=order_status.SELECTED,
                created_at=now,
            )
            .on_conflict_do_nothing(index_elements=["student_id", "date", "slot"])
        )
        inserted += db.execute(statement).rowcount or 0
    db.commit()

    result = CommitResult(
        inserted=inserted,
        skipped_duplicates=len(entries) - inserted,
        skipped_invalid=skipped_invalid,
    )
    logger.info(
        "[ORDERS] Commit for %s: inserted=%s duplicates=%s invalid=%s",
        effective.student_code,
        result.inserted,
        result.skipped_duplicates,
        result.skipped_invalid,
    )
    return result


def mark_dateslots_paid(db: Session, student_id: int, dateslots: list[tuple[date, str]]) -> int:
    """Move the given SELECTED rows of one student to PAID."""
    now = utc_now()
    updated = 0
    for slot_date, slot in dateslots:
        result = db.execute(
            update(Order)
            .where(
                Order.student_id == student_id,
                Order.date == slot_date,
                Order.slot == slot,
                Order.status.in_(order_status.sources_for(order_status.PAID)),
            )
            .values(status=order_status.PAID, updated_at=now)
        )
        updated += result.rowcount or 0
    db.commit()
    return updated


def confirm_payment_and_mark_paid(
    db: Session,
    *,
    payment_key: str,
    order_id: str,
    amount: int,
    code: str | None,
    raw_dateslots: list[dict[str, Any]],
) -> PaymentResult:
    """Confirm a payment with the gateway, then mark the paid slots.

    Gateway failures propagate as ``PaymentConfirmationError`` before any row
    changes. Once the gateway has confirmed, the charge has happened: an
    unknown student code is logged for manual reconciliation instead of
    failing the request.
    """
    dateslots: list[tuple[date, str]] = []
    for raw in raw_dateslots:
        if not isinstance(raw, dict) or not raw.get("date") or not raw.get("slot"):
            continue
        dateslots.append((parse_order_date(raw["date"]), parse_slot(raw["slot"])))

    confirmation: PaymentConfirmation = confirm_payment(payment_key=payment_key, order_id=order_id, amount=amount)

    student = db.scalar(select(Student).where(Student.code == (code or "").strip()).limit(1)) if code else None
    if student is None:
        logger.warning(
            "[PAYMENT] Payment %s confirmed (amount=%s) but student code %r is unknown; needs manual reconciliation.",
            order_id,
            amount,
            code,
        )
        return PaymentResult(receipt=confirmation.receipt, student_found=False, updated=0)

    updated = mark_dateslots_paid(db, student.id, dateslots)
    logger.info("[PAYMENT] Payment %s confirmed for %s; %s rows marked PAID.", order_id, student.code, updated)
    return PaymentResult(receipt=confirmation.receipt, student_found=True, updated=updated)


def cancel_order(db: Session, order_id: int) -> int:
    """Delete one order row; deleting a missing id affects zero rows."""
    deleted = db.execute(delete(Order).where(Order.id == order_id)).rowcount or 0
    db.commit()
    return deleted


def cancel_student_orders(
    db: Session,
    code: str,
    *,
    start: date | None = None,
    end: date | None = None,
    slot: str | None = None,
) -> int:
    """Delete a student's rows in an optional date range and slot, regardless of status."""
    student = get_student_by_code(db, code)
    conditions = [Order.student_id == student.id]
    if start is not None:
        conditions.append(Order.date >= start)
    if end is not None:
        conditions.append(Order.date <= end)
    if slot in MEAL_SLOTS:
        conditions.append(Order.slot == slot)

    deleted = db.execute(delete(Order).where(*conditions)).rowcount or 0
    db.commit()
    logger.info("[ORDERS] Cancelled %s rows for %s", deleted, student.code)
    return deleted


def reset_all_orders(db: Session) -> int:
    deleted = db.execute(delete(Order)).rowcount or 0
    db.commit()
    logger.warning("[RESET_ORDERS] All orders deleted: %s rows", deleted)
    return deleted


def list_orders(
    db: Session,
    *,
    start: date | None = None,
    end: date | None = None,
    query: str | None = None,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Return admin order rows and per-student groups with totals."""
    statement = (
        select(Order, Student)
        .join(Student, Student.id == Order.student_id)
        .where(Order.status.in_(order_status.APPLIED_STATUSES))
    )
    if start is not None:
        statement = statement.where(Order.date >= start)
    if end is not None:
        statement = statement.where(Order.date <= end)
    if query and query.strip():
        pattern = f"%{query.strip()}%"
        statement = statement.where(or_(Student.name.like(pattern), Student.code.like(pattern)))
    statement = statement.order_by(Student.name.asc(), Order.date.asc(), Order.slot.asc())

    rows: list[dict[str, Any]] = []
    groups: dict[int, dict[str, Any]] = {}
    for order, student in db.execute(statement).all():
        item = {"id": order.id, "date": order.date, "slot": order.slot, "price": order.price, "status": order.status}
        rows.append({**item, "student_id": student.id, "name": student.name, "code": student.code})
        group = groups.setdefault(
            student.id,
            {"student_id": student.id, "name": student.name, "code": student.code, "total_amount": 0, "count": 0, "items": []},
        )
        group["items"].append(item)
        group["count"] += 1
        group["total_amount"] += int(order.price or 0)
    return rows, list(groups.values())


def list_student_orders(db: Session, code: str) -> tuple[Student, list[Order]]:
    student = get_student_by_code(db, code)
    orders = db.scalars(
        select(Order).where(Order.student_id == student.id).order_by(Order.date.asc(), Order.slot.asc())
    ).all()
    return student, list(orders)
