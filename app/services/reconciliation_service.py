"""Admin reconciliation views and bulk payment marking."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models import Order, Student
from app.services import order_status
from app.services.policy_service import MEAL_SLOTS
from app.utils.time import iter_days, utc_now

logger = logging.getLogger(__name__)


@dataclass
class ApplicantSummary:
    id: int
    name: str
    code: str
    applied_count: int = 0
    paid_count: int = 0
    total_amount: int = 0

    @property
    def paid(self) -> bool:
        return self.applied_count > 0 and self.paid_count == self.applied_count


@dataclass
class SlotState:
    applied: bool = False
    paid: bool = False


@dataclass
class DailyApplicant:
    id: int
    name: str
    code: str
    lunch: SlotState = field(default_factory=SlotState)
    dinner: SlotState = field(default_factory=SlotState)


@dataclass(frozen=True)
class MarkResult:
    updated: int
    skipped: int


@dataclass(frozen=True)
class PrintEntry:
    id: int
    name: str
    code: str
    status: str


@dataclass
class PrintView:
    date: date
    lunch: list[PrintEntry]
    dinner: list[PrintEntry]

    @property
    def counts(self) -> dict[str, int]:
        return {
            "lunch_total": len(self.lunch),
            "dinner_total": len(self.dinner),
            "lunch_paid": sum(1 for entry in self.lunch if entry.status == order_status.PAID),
            "dinner_paid": sum(1 for entry in self.dinner if entry.status == order_status.PAID),
        }


def _applied_rows(db: Session, start: date, end: date) -> list[tuple[Order, Student]]:
    statement = (
        select(Order, Student)
        .join(Student, Student.id == Order.student_id)
        .where(Order.date >= start, Order.date <= end, Order.status.in_(order_status.APPLIED_STATUSES))
        .order_by(Student.name.asc(), Student.id.asc())
    )
    return list(db.execute(statement).all())


def update_status_by_filter(
    db: Session,
    student_id: int,
    new_status: str,
    start: date,
    end: date,
    slot: str | None = None,
) -> int:
    """Set ``new_status`` on a student's rows within [start, end].

    Only rows allowed to move to ``new_status`` are touched, so the count is
    the number of rows that actually changed. The caller commits.
    """
    statement = update(Order).where(
        Order.student_id == student_id,
        Order.date >= start,
        Order.date <= end,
        Order.status.in_(order_status.sources_for(new_status)),
    )
    if slot is not None:
        statement = statement.where(Order.slot == slot)
    result = db.execute(statement.values(status=new_status, updated_at=utc_now()))
    return result.rowcount or 0


def _student_ids_by_code(db: Session, codes: set[str]) -> dict[str, int]:
    if not codes:
        return {}
    rows = db.execute(select(Student.code, Student.id).where(Student.code.in_(codes))).all()
    return {code: student_id for code, student_id in rows}


def _normalized_slot(value: Any) -> str | None:
    slot = str(value or "").strip().upper()
    return slot if slot in MEAL_SLOTS else None


def applicants_range(db: Session, start: date, end: date) -> list[ApplicantSummary]:
    """Per-student counts of applied and paid rows in [start, end], ordered by name."""
    summaries: dict[int, ApplicantSummary] = {}
    for order, student in _applied_rows(db, start, end):
        summary = summaries.setdefault(student.id, ApplicantSummary(id=student.id, name=student.name, code=student.code))
        summary.applied_count += 1
        summary.total_amount += int(order.price or 0)
        if order.status == order_status.PAID:
            summary.paid_count += 1
    return list(summaries.values())


def mark_range(db: Session, start: date, end: date, items: list[dict[str, Any]]) -> MarkResult:
    """Mark students paid or unpaid for a date range.

    Items are ``{code, slot?, paid}``. A missing or unrecognized slot marks both
    slots. Blank or unknown codes are skipped and counted.
    """
    codes = {str(item.get("code") or "").strip() for item in items if isinstance(item, dict)}
    ids = _student_ids_by_code(db, codes - {""})

    updated = 0
    skipped = 0
    for item in items:
        code = str(item.get("code") or "").strip() if isinstance(item, dict) else ""
        student_id = ids.get(code)
        if student_id is None:
            skipped += 1
            continue
        new_status = order_status.status_for_paid_flag(bool(item.get("paid")))
        updated += update_status_by_filter(db, student_id, new_status, start, end, _normalized_slot(item.get("slot")))
    db.commit()
    logger.info("[PAYMENTS] Range %s..%s marked: updated=%s skipped=%s", start, end, updated, skipped)
    return MarkResult(updated=updated, skipped=skipped)


def applicants_for_date(db: Session, target_date: date) -> list[DailyApplicant]:
    """Per-student lunch/dinner application state for one day."""
    counters: dict[int, dict[str, list[int]]] = {}
    applicants: dict[int, DailyApplicant] = {}
    for order, student in _applied_rows(db, target_date, target_date):
        applicants.setdefault(student.id, DailyApplicant(id=student.id, name=student.name, code=student.code))
        applied_paid = counters.setdefault(student.id, {}).setdefault(order.slot, [0, 0])
        applied_paid[0] += 1
        if order.status == order_status.PAID:
            applied_paid[1] += 1

    for student_id, applicant in applicants.items():
        for slot, state in (("LUNCH", applicant.lunch), ("DINNER", applicant.dinner)):
            applied, paid = counters[student_id].get(slot, [0, 0])
            state.applied = applied > 0
            state.paid = applied > 0 and paid == applied
    return list(applicants.values())


def mark_date(db: Session, target_date: date, items: list[dict[str, Any]]) -> MarkResult:
    """Single-day variant of ``mark_range``; items without a valid slot are skipped."""
    codes = {str(item.get("code") or "").strip() for item in items if isinstance(item, dict)}
    ids = _student_ids_by_code(db, codes - {""})

    updated = 0
    skipped = 0
    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        student_id = ids.get(str(item.get("code") or "").strip())
        slot = _normalized_slot(item.get("slot"))
        if student_id is None or slot is None:
            skipped += 1
            continue
        new_status = order_status.status_for_paid_flag(bool(item.get("paid")))
        updated += update_status_by_filter(db, student_id, new_status, target_date, target_date, slot)
    db.commit()
    return MarkResult(updated=updated, skipped=skipped)


def weekly_summary(db: Session, start: date, end: date) -> dict[str, Any]:
    """Matrix of PAID meals per student and day, split into applied and not applied."""
    days = iter_days(start, end)
    paid: set[tuple[int, date, str]] = set()
    for order, _student in _applied_rows(db, start, end):
        if order.status == order_status.PAID:
            paid.add((order.student_id, order.date, order.slot))

    rows: list[dict[str, Any]] = []
    applied: list[dict[str, Any]] = []
    not_applied: list[dict[str, Any]] = []
    for student in db.scalars(select(Student).order_by(Student.name.asc(), Student.id.asc())).all():
        by_date: dict[str, dict[str, bool]] = {}
        items: list[dict[str, Any]] = []
        for day in days:
            marks = {slot: (student.id, day, slot) in paid for slot in MEAL_SLOTS}
            by_date[day.isoformat()] = marks
            items.extend({"date": day, "slot": slot} for slot in MEAL_SLOTS if marks[slot])
        identity = {"id": student.id, "name": student.name, "code": student.code}
        rows.append({**identity, "count": len(items), "by_date": by_date})
        if items:
            applied.append({**identity, "count": len(items), "items": items})
        else:
            not_applied.append(identity)

    return {"start": start, "end": end, "days": days, "rows": rows, "applied": applied, "not_applied": not_applied}


def print_view(db: Session, target_date: date) -> PrintView:
    """One entry per student and slot for a day, paid entries first, then by name."""
    paid_by_slot: dict[str, dict[int, bool]] = {slot: {} for slot in MEAL_SLOTS}
    students: dict[int, Student] = {}
    for order, student in _applied_rows(db, target_date, target_date):
        students[student.id] = student
        slot_map = paid_by_slot[order.slot]
        slot_map[student.id] = slot_map.get(student.id, False) or order.status == order_status.PAID

    def entries(slot: str) -> list[PrintEntry]:
        result = [
            PrintEntry(
                id=student_id,
                name=students[student_id].name,
                code=students[student_id].code,
                status=order_status.PAID if is_paid else order_status.SELECTED,
            )
            for student_id, is_paid in paid_by_slot[slot].items()
        ]
        return sorted(result, key=lambda entry: (entry.status != order_status.PAID, entry.name))

    return PrintView(date=target_date, lunch=entries("LUNCH"), dinner=entries("DINNER"))


def attendance_csv(db: Session, target_date: date) -> str:
    """CSV of PAID names for a day with columns ``slot,name``."""
    statement = (
        select(Order.slot, Student.name)
        .join(Student, Student.id == Order.student_id)
        .where(Order.date == target_date, Order.status == order_status.PAID)
        .order_by(Student.name.asc())
    )
    names: dict[str, list[str]] = {slot: [] for slot in MEAL_SLOTS}
    for slot, name in db.execute(statement).all():
        names[slot].append(name)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["slot", "name"])
    for slot in MEAL_SLOTS:
        for name in names[slot]:
            writer.writerow([slot, name])
    return buffer.getvalue()
