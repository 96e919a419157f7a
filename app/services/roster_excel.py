"""Excel roster import/export for the student list."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Student
from app.services.errors import ValidationError

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 30
EXPORT_SHEET_TITLE = "학생DB"
EXPORT_HEADERS = ["ID", "이름", "학년", "학생전화", "보호자전화"]
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_NAME_PATTERNS = (re.compile(r"(^|[^가-힣a-z])이름([^가-힣a-z]|$)"), re.compile(r"(^|_)name($|_)"))
_CODE_PATTERNS = (re.compile(r"(^|[^가-힣a-z])코드([^가-힣a-z]|$)"), re.compile(r"(code|id)\b"))
_STUDENT_PHONE_PATTERNS = (re.compile(r"학생.?연락"), re.compile(r"(student.*(phone|tel)|phone_student|학생전화)"))
_PARENT_PHONE_PATTERNS = (re.compile(r"(학부모|보호자).?연락"), re.compile(r"(parent.*(phone|tel)|phone_parent|보호자전화)"))


@dataclass
class RosterRow:
    name: str = ""
    code: str = ""
    student_phone: str = ""
    parent_phone: str = ""


@dataclass
class ExcelImportResult:
    imported: int = 0
    skipped_existing: list[dict[str, str]] = field(default_factory=list)
    skipped_code_conflict: list[dict[str, str]] = field(default_factory=list)


def only_digits(value: Any) -> str:
    return re.sub(r"\D", "", str(value or ""))


def normalize_phone(raw: Any) -> str:
    """Format Korean phone numbers as ``010-1234-5678`` or ``02x-xxx-xxxx``."""
    digits = only_digits(raw)
    if len(digits) == 11 and digits.startswith("010"):
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return str(raw or "")


def header_key(value: Any) -> str | None:
    """Map a spreadsheet header cell to a roster field, or None."""
    text = str(value if value is not None else "").strip().lower()
    if not text:
        return None
    if any(pattern.search(text) for pattern in _NAME_PATTERNS):
        return "name"
    if any(pattern.search(text) for pattern in _CODE_PATTERNS):
        return "code"
    if any(pattern.search(text) for pattern in _STUDENT_PHONE_PATTERNS):
        return "student_phone"
    if any(pattern.search(text) for pattern in _PARENT_PHONE_PATTERNS):
        return "parent_phone"
    return None


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _detect_header(rows: list[list[Any]]) -> tuple[int, list[str | None]]:
    for index, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        keys = [header_key(cell) for cell in row]
        recognized = [key for key in keys if key]
        if len(recognized) >= 2 and ("name" in recognized or "code" in recognized):
            return index, keys
    return 0, [header_key(cell) for cell in rows[0]]


def parse_roster_workbook(content: bytes) -> list[RosterRow]:
    """Read students from the first sheet of an .xlsx workbook.

    The header row is the first of the leading rows that has at least two
    recognized columns, one of them name or code. Fully empty rows are dropped.
    """
    from openpyxl import load_workbook

    try:
        workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:  # openpyxl raises several unrelated types for bad files
        raise ValidationError("Uploaded file is not a readable .xlsx workbook", code="INVALID_FILE") from exc

    try:
        sheet = workbook.worksheets[0]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    if not rows:
        return []

    header_index, keys = _detect_header(rows)
    result: list[RosterRow] = []
    for row in rows[header_index + 1 :]:
        entry = RosterRow()
        for column, key in enumerate(keys):
            if not key or column >= len(row):
                continue
            value = row[column]
            if key in ("student_phone", "parent_phone"):
                value = normalize_phone(_cell_text(value))
            setattr(entry, key, _cell_text(value))
        if entry.name or entry.code or entry.student_phone or entry.parent_phone:
            result.append(entry)
    return result


def import_roster(db: Session, rows: list[RosterRow]) -> ExcelImportResult:
    """Add new students from parsed roster rows without touching existing ones."""
    by_code: dict[str, str] = {}
    known_pairs: set[tuple[str, str]] = set()
    for student in db.scalars(select(Student)).all():
        by_code[student.code.strip()] = (student.name or "").strip()
        known_pairs.add(((student.name or "").strip(), student.code.strip()))

    result = ExcelImportResult()
    for row in rows:
        name, code = row.name.strip(), row.code.strip()
        if not name or not code:
            continue
        if (name, code) in known_pairs:
            result.skipped_existing.append({"name": name, "code": code})
            continue
        previous = by_code.get(code)
        if previous is not None:
            result.skipped_code_conflict.append({"name": name, "code": code, "exists_as": previous})
            continue

        db.add(Student(name=name, code=code, phone=row.student_phone.strip(), parent_phone=row.parent_phone.strip()))
        by_code[code] = name
        known_pairs.add((name, code))
        result.imported += 1
    db.commit()
    logger.info(
        "[STUDENTS] Excel import: imported=%s existing=%s conflicts=%s",
        result.imported,
        len(result.skipped_existing),
        len(result.skipped_code_conflict),
    )
    return result


def export_roster_workbook(db: Session) -> bytes:
    from openpyxl import Workbook

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = EXPORT_SHEET_TITLE
    sheet.append(EXPORT_HEADERS)
    for student in db.scalars(select(Student).order_by(Student.name.asc(), Student.id.asc())).all():
        sheet.append([student.code, student.name, "", student.phone or "", student.parent_phone or ""])

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
