"""Student roster management: CRUD, bulk upsert and CSV import/export."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Student
from app.services.errors import DuplicateStudentCodeError, StudentNotFoundError, ValidationError
from app.utils.weekdays import InvalidWeekdayError, format_weekdays, parse_weekdays

logger = logging.getLogger(__name__)

CSV_EXPORT_COLUMNS = ["name", "code", "phone", "parent_phone"]


@dataclass(frozen=True)
class UpsertResult:
    inserted: int
    updated: int


def _clean(value: Any) -> str:
    return str(value or "").strip()


def list_students(db: Session) -> list[Student]:
    return list(db.scalars(select(Student).order_by(Student.name.asc(), Student.id.asc())).all())


def get_student(db: Session, student_id: int) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise StudentNotFoundError(student_id)
    return student


def _find_by_code(db: Session, code: str) -> Student | None:
    return db.scalar(select(Student).where(Student.code == code).limit(1))


def upsert_student(db: Session, *, name: str, code: str, phone: str | None = None, parent_phone: str | None = None) -> tuple[Student, bool]:
    """Create a student or update the contact data of the one holding ``code``.

    Returns the row and whether it was newly created.
    """
    name, code = _clean(name), _clean(code)
    if not name or not code:
        raise ValidationError("name and code are required", code="NAME_AND_CODE_REQUIRED")

    student = _find_by_code(db, code)
    created = student is None
    if student is None:
        student = Student(code=code, name=name)
        db.add(student)
    student.name = name
    student.phone = _clean(phone)
    student.parent_phone = _clean(parent_phone)
    db.commit()
    db.refresh(student)
    return student, created


def update_student(
    db: Session,
    student_id: int,
    *,
    name: str,
    code: str,
    phone: str | None = None,
    parent_phone: str | None = None,
) -> Student:
    student = get_student(db, student_id)
    name, code = _clean(name), _clean(code)
    if not name or not code:
        raise ValidationError("name and code are required", code="NAME_AND_CODE_REQUIRED")

    holder = _find_by_code(db, code)
    if holder is not None and holder.id != student.id:
        raise DuplicateStudentCodeError(f"Code {code} is already used by another student")

    student.name = name
    student.code = code
    student.phone = _clean(phone)
    student.parent_phone = _clean(parent_phone)
    db.commit()
    db.refresh(student)
    return student


def delete_student(db: Session, student_id: int) -> None:
    """Delete a student; their orders go with them."""
    student = get_student(db, student_id)
    db.delete(student)
    db.commit()
    logger.info("[STUDENTS] Deleted student %s", student_id)


def bulk_upsert(db: Session, rows: list[dict[str, Any]]) -> UpsertResult:
    """Upsert many students by code; rows without name or code are ignored."""
    existing = {student.code: student for student in db.scalars(select(Student)).all()}
    inserted = 0
    updated = 0
    for raw in rows:
        name, code = _clean(raw.get("name")), _clean(raw.get("code"))
        if not name or not code:
            continue
        student = existing.get(code)
        if student is None:
            student = Student(code=code, name=name)
            db.add(student)
            existing[code] = student
            inserted += 1
        else:
            updated += 1
        student.name = name
        student.phone = _clean(raw.get("phone"))
        student.parent_phone = _clean(raw.get("parent_phone"))
    db.commit()
    return UpsertResult(inserted=inserted, updated=updated)


def _optional_date(value: str, column: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {column}: {value!r}", code="INVALID_DATE") from exc


def _optional_price(value: str) -> int | None:
    if not value:
        return None
    try:
        price = int(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid price_override: {value!r}", code="INVALID_PRICE") from exc
    if price < 0:
        raise ValidationError("price_override must be >= 0", code="INVALID_PRICE")
    return price


def import_csv(db: Session, content: str) -> int:
    """Upsert students from CSV with header ``code,name,allowed_weekdays,start_date,end_date,price_override``.

    Policy columns overwrite the stored overrides. Every row is validated
    before anything is written.
    """
    reader = csv.DictReader(io.StringIO(content.lstrip("﻿")))
    parsed: list[dict[str, Any]] = []
    for record in reader:
        values = {key.strip(): _clean(value) for key, value in record.items() if key}
        if not any(values.values()):
            continue
        if not values.get("code") or not values.get("name"):
            raise ValidationError("Every CSV row needs code and name", code="NAME_AND_CODE_REQUIRED")
        try:
            weekdays = parse_weekdays(values.get("allowed_weekdays"))
        except InvalidWeekdayError as exc:
            raise ValidationError(str(exc), code="INVALID_WEEKDAY") from exc
        parsed.append(
            {
                "code": values["code"],
                "name": values["name"],
                "allowed_weekdays": format_weekdays(weekdays) if weekdays else None,
                "start_date": _optional_date(values.get("start_date", ""), "start_date"),
                "end_date": _optional_date(values.get("end_date", ""), "end_date"),
                "price_override": _optional_price(values.get("price_override", "")),
            }
        )

    for row in parsed:
        student = _find_by_code(db, row["code"])
        if student is None:
            student = Student(code=row["code"], name=row["name"])
            db.add(student)
        for key, value in row.items():
            setattr(student, key, value)
        db.flush()
    db.commit()
    logger.info("[STUDENTS] CSV import processed %s rows", len(parsed))
    return len(parsed)


def export_csv(db: Session) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
    buffer.write(",".join(CSV_EXPORT_COLUMNS) + "\n")
    for student in list_students(db):
        writer.writerow([student.name, student.code, student.phone or "", student.parent_phone or ""])
    return buffer.getvalue()
