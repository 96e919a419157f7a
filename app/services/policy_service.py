"""Global policy access and per-student effective policy resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.seed import ensure_policy_row
from app.models import Blackout, Policy, Student
from app.services.errors import RecordNotFoundError, StudentNotFoundError, ValidationError
from app.utils.weekdays import InvalidWeekdayError, Weekday, format_weekdays, parse_weekdays

DEFAULT_HORIZON_DAYS: int = 28
MEAL_SLOTS: tuple[str, ...] = ("LUNCH", "DINNER")


@dataclass(frozen=True)
class PolicySettings:
    """In-memory view of the singleton policy row."""

    base_price: int
    allowed_weekdays: frozenset[Weekday]
    start_date: date | None = None
    end_date: date | None = None
    sms_extra_text: str | None = None


@dataclass(frozen=True)
class BlackoutDay:
    id: int
    date: date
    slot: str


@dataclass(frozen=True)
class EffectivePolicy:
    """Ordering window and price that apply to one student."""

    student_id: int
    student_code: str
    student_name: str
    base_price: int
    allowed_weekdays: frozenset[Weekday]
    start_date: date | None
    end_date: date | None
    blackouts: list[BlackoutDay] = field(default_factory=list)
    sms_extra_text: str | None = None

    @property
    def window_is_empty(self) -> bool:
        return self.start_date is not None and self.end_date is not None and self.start_date > self.end_date


def _to_settings(row: Policy) -> PolicySettings:
    return PolicySettings(
        base_price=int(row.base_price),
        allowed_weekdays=parse_weekdays(row.allowed_weekdays, strict=False),
        start_date=row.start_date,
        end_date=row.end_date,
        sms_extra_text=row.sms_extra_text,
    )


def load_policy(db: Session) -> PolicySettings:
    """Read the global policy, creating the default row if it is missing."""
    return _to_settings(ensure_policy_row(db))


def save_policy(db: Session, policy: PolicySettings) -> PolicySettings:
    """Persist the global policy into the singleton row."""
    if policy.base_price < 0:
        raise ValidationError("base_price must be >= 0")
    row = ensure_policy_row(db)
    row.base_price = policy.base_price
    row.allowed_weekdays = format_weekdays(policy.allowed_weekdays)
    row.start_date = policy.start_date
    row.end_date = policy.end_date
    row.sms_extra_text = policy.sms_extra_text
    db.commit()
    db.refresh(row)
    return _to_settings(row)


def get_student_by_code(db: Session, code: str) -> Student:
    student = db.scalar(select(Student).where(Student.code == code.strip()).limit(1))
    if student is None:
        raise StudentNotFoundError(code)
    return student


def _later(first: date | None, second: date | None) -> date | None:
    if first is None:
        return second
    if second is None:
        return first
    return max(first, second)


def _earlier(first: date | None, second: date | None) -> date | None:
    if first is None:
        return second
    if second is None:
        return first
    return min(first, second)


def list_blackouts(db: Session) -> list[BlackoutDay]:
    rows = db.scalars(select(Blackout).order_by(Blackout.date, Blackout.slot)).all()
    return [BlackoutDay(id=row.id, date=row.date, slot=row.slot) for row in rows]


def resolve_effective_policy(db: Session, code: str) -> EffectivePolicy:
    """Merge the global policy with a student's overrides.

    Start dates take the later of both bounds and end dates the earlier, so a
    student override can only narrow the global window. The result may be an
    inverted (empty) window; callers handle that through ``selectable_slots``.
    """
    student = get_student_by_code(db, code)
    global_policy = load_policy(db)

    student_days = parse_weekdays(student.allowed_weekdays, strict=False)
    allowed = student_days or global_policy.allowed_weekdays
    base_price = student.price_override if student.price_override is not None else global_policy.base_price

    return EffectivePolicy(
        student_id=student.id,
        student_code=student.code,
        student_name=student.name,
        base_price=int(base_price),
        allowed_weekdays=allowed,
        start_date=_later(global_policy.start_date, student.start_date),
        end_date=_earlier(global_policy.end_date, student.end_date),
        blackouts=list_blackouts(db),
        sms_extra_text=global_policy.sms_extra_text,
    )


def selectable_slots(
    effective: EffectivePolicy,
    *,
    today: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> list[tuple[date, str]]:
    """List the (date, slot) pairs a student may pick.

    The window is intersected with the allowed weekdays and blackout days are
    removed. Open-ended windows are clipped to ``horizon_days`` from the first
    usable day; an inverted window yields no slots.
    """
    first_day = max(effective.start_date, today) if effective.start_date else today
    last_day = first_day + timedelta(days=horizon_days - 1)
    if effective.end_date is not None:
        last_day = min(last_day, effective.end_date)
    if first_day > last_day:
        return []

    blocked: dict[date, set[str]] = {}
    for blackout in effective.blackouts:
        slots = set(MEAL_SLOTS) if blackout.slot == "BOTH" else {blackout.slot}
        blocked.setdefault(blackout.date, set()).update(slots)

    result: list[tuple[date, str]] = []
    current = first_day
    while current <= last_day:
        if Weekday.of(current) in effective.allowed_weekdays:
            for slot in MEAL_SLOTS:
                if slot not in blocked.get(current, set()):
                    result.append((current, slot))
        current += timedelta(days=1)
    return result


def set_student_override(
    db: Session,
    student_id: int,
    *,
    allowed_weekdays: frozenset[Weekday] | None,
    start_date: date | None,
    end_date: date | None,
    price_override: int | None,
) -> Student:
    """Replace a student's policy overrides; empty values clear them."""
    student = db.get(Student, student_id)
    if student is None:
        raise StudentNotFoundError(student_id)
    if price_override is not None and price_override < 0:
        raise ValidationError("price_override must be >= 0")

    student.allowed_weekdays = format_weekdays(allowed_weekdays) if allowed_weekdays else None
    student.start_date = start_date
    student.end_date = end_date
    student.price_override = price_override
    db.commit()
    db.refresh(student)
    return student


def parse_weekday_input(raw: str | list[str] | None) -> frozenset[Weekday]:
    """Parse weekday input coming from the API, reporting bad tokens as validation errors."""
    try:
        return parse_weekdays(raw)
    except InvalidWeekdayError as exc:
        raise ValidationError(str(exc), code="INVALID_WEEKDAY") from exc


def add_blackout(db: Session, blackout_date: date, slot: str) -> Blackout:
    normalized = slot.strip().upper()
    if normalized not in ("BOTH", *MEAL_SLOTS):
        raise ValidationError(f"Invalid blackout slot: {slot}", code="INVALID_SLOT")
    row = Blackout(date=blackout_date, slot=normalized)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_blackout(db: Session, blackout_id: int) -> None:
    row = db.get(Blackout, blackout_id)
    if row is None:
        raise RecordNotFoundError(f"Blackout {blackout_id} not found")
    db.delete(row)
    db.commit()
