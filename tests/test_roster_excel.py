"""Excel roster parsing, import and export tests."""

from io import BytesIO
from pathlib import Path

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.db.base import Base
from app.models import Student
from app.services import roster_excel
from app.services.errors import ValidationError

openpyxl = pytest.importorskip("openpyxl")


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _session(tmp_path: Path, name: str) -> Session:
    engine = _build_test_engine(tmp_path / name)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _workbook_bytes(rows: list[list]) -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("01012345678", "010-1234-5678"),
        ("010 1234 5678", "010-1234-5678"),
        ("0212345678", "021-234-5678"),
        ("12345", "12345"),
        (None, ""),
    ],
)
def test_normalize_phone(raw, expected) -> None:
    assert roster_excel.normalize_phone(raw) == expected


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("이름", "name"),
        ("Name", "name"),
        ("ID", "code"),
        ("학생 코드", "code"),
        ("학생연락처", "student_phone"),
        ("보호자 연락처", "parent_phone"),
        ("parent_phone", "parent_phone"),
        ("학년", None),
        (None, None),
    ],
)
def test_header_key(header, expected) -> None:
    assert roster_excel.header_key(header) == expected


def test_parse_finds_header_below_title_rows() -> None:
    content = _workbook_bytes(
        [
            ["2025 학생 명단"],
            [],
            ["ID", "이름", "학년", "학생연락처", "보호자 연락처"],
            [1001, "김민수", "고2", "01012345678", "010-9876-5432"],
            [None, None, None, None, None],
            ["1002", "이서연", "고1", "", ""],
        ]
    )

    rows = roster_excel.parse_roster_workbook(content)

    assert rows == [
        roster_excel.RosterRow(name="김민수", code="1001", student_phone="010-1234-5678", parent_phone="010-9876-5432"),
        roster_excel.RosterRow(name="이서연", code="1002", student_phone="", parent_phone=""),
    ]


def test_parse_rejects_non_workbook() -> None:
    with pytest.raises(ValidationError) as exc_info:
        roster_excel.parse_roster_workbook(b"not a zip file")
    assert exc_info.value.code == "INVALID_FILE"


def test_import_adds_only_new_students(tmp_path: Path) -> None:
    with _session(tmp_path, "roster_import.db") as db:
        db.add_all([Student(code="1001", name="김민수"), Student(code="1003", name="박지훈")])
        db.commit()

        result = roster_excel.import_roster(
            db,
            [
                roster_excel.RosterRow(name="김민수", code="1001"),
                roster_excel.RosterRow(name="최유진", code="1003"),
                roster_excel.RosterRow(name="이서연", code="1002", student_phone="010-1111-2222"),
                roster_excel.RosterRow(name="", code="1004"),
            ],
        )
        stored = {student.code: student.name for student in db.scalars(select(Student)).all()}

    assert result.imported == 1
    assert result.skipped_existing == [{"name": "김민수", "code": "1001"}]
    assert result.skipped_code_conflict == [{"name": "최유진", "code": "1003", "exists_as": "박지훈"}]
    assert stored == {"1001": "김민수", "1002": "이서연", "1003": "박지훈"}


def test_export_writes_roster_sheet(tmp_path: Path) -> None:
    with _session(tmp_path, "roster_export.db") as db:
        db.add(Student(code="1001", name="김민수", phone="010-1234-5678", parent_phone="010-9876-5432"))
        db.commit()
        content = roster_excel.export_roster_workbook(db)

    workbook = openpyxl.load_workbook(BytesIO(content))
    sheet = workbook.active
    assert sheet.title == "학생DB"
    header, first = [list(row) for row in sheet.iter_rows(values_only=True)]
    assert header == ["ID", "이름", "학년", "학생전화", "보호자전화"]
    assert first[:2] == ["1001", "김민수"]
    assert first[2] in (None, "")
    assert first[3:] == ["010-1234-5678", "010-9876-5432"]
    assert roster_excel.parse_roster_workbook(content)[0].code == "1001"
