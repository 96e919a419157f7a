"""Admin student roster endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.models import Student
from app.schemas.auth import OkResponse
from app.schemas.student import (
    BulkUpsertRequest,
    BulkUpsertResponse,
    CsvImportResponse,
    ExcelImportResponse,
    ExcelPreviewResponse,
    RosterRowRead,
    StudentPolicyRequest,
    StudentRead,
    StudentWrite,
)
from app.services import roster_excel, student_service
from app.services.policy_service import parse_weekday_input, set_student_override

router: APIRouter = APIRouter()


@router.get("/students", response_model=list[StudentRead])
def list_students(db: Session = Depends(get_db)) -> list[Student]:
    return student_service.list_students(db)


@router.post("/students", response_model=StudentRead)
def upsert_student(payload: StudentWrite, db: Session = Depends(get_db)) -> Student:
    """Create a student, or update the one that already holds the code."""
    try:
        student, _created = student_service.upsert_student(
            db, name=payload.name, code=payload.code, phone=payload.phone, parent_phone=payload.parent_phone
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return student


@router.put("/students/{student_id}", response_model=StudentRead)
def update_student(student_id: int, payload: StudentWrite, db: Session = Depends(get_db)) -> Student:
    try:
        return student_service.update_student(
            db,
            student_id,
            name=payload.name,
            code=payload.code,
            phone=payload.phone,
            parent_phone=payload.parent_phone,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.delete("/students/{student_id}", response_model=OkResponse)
def delete_student(student_id: int, db: Session = Depends(get_db)) -> OkResponse:
    try:
        student_service.delete_student(db, student_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OkResponse()


@router.post("/students/bulk-upsert", response_model=BulkUpsertResponse)
def bulk_upsert(payload: BulkUpsertRequest, db: Session = Depends(get_db)) -> BulkUpsertResponse:
    result = student_service.bulk_upsert(db, payload.students)
    return BulkUpsertResponse(inserted=result.inserted, updated=result.updated)


@router.post("/students/import", response_model=CsvImportResponse)
async def import_students_csv(request: Request, db: Session = Depends(get_db)) -> CsvImportResponse:
    """Upsert students from a ``text/csv`` request body."""
    raw = await request.body()
    try:
        imported = student_service.import_csv(db, raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail={"error": "INVALID_ENCODING", "message": "CSV must be UTF-8"}) from exc
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return CsvImportResponse(imported=imported)


@router.get("/students/export")
def export_students_csv(db: Session = Depends(get_db)) -> Response:
    return Response(
        content=student_service.export_csv(db),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="students.csv"'},
    )


async def _read_workbook(file: UploadFile | None) -> list[roster_excel.RosterRow]:
    if file is None:
        raise HTTPException(status_code=400, detail={"error": "FILE_REQUIRED", "message": "Excel file is required"})
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail={"error": "FILE_REQUIRED", "message": "Excel file is empty"})
    try:
        return roster_excel.parse_roster_workbook(content)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@router.post("/students/preview-excel", response_model=ExcelPreviewResponse)
async def preview_excel(file: UploadFile | None = File(default=None)) -> ExcelPreviewResponse:
    rows = await _read_workbook(file)
    return ExcelPreviewResponse(students=[RosterRowRead.model_validate(row) for row in rows])


@router.post("/students/import-excel", response_model=ExcelImportResponse)
async def import_excel(file: UploadFile | None = File(default=None), db: Session = Depends(get_db)) -> ExcelImportResponse:
    rows = await _read_workbook(file)
    result = roster_excel.import_roster(db, rows)
    return ExcelImportResponse(
        imported=result.imported,
        skipped_existing=result.skipped_existing,
        skipped_code_conflict=result.skipped_code_conflict,
    )


@router.get("/students/export-excel")
def export_excel(db: Session = Depends(get_db)) -> Response:
    return Response(
        content=roster_excel.export_roster_workbook(db),
        media_type=roster_excel.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="students.xlsx"'},
    )


@router.post("/student-policy/{student_id}", response_model=StudentRead)
def update_student_policy(student_id: int, payload: StudentPolicyRequest, db: Session = Depends(get_db)) -> Student:
    """Replace a student's weekday, window and price overrides."""
    try:
        weekdays = parse_weekday_input(payload.allowed_weekdays)
        return set_student_override(
            db,
            student_id,
            allowed_weekdays=weekdays,
            start_date=payload.start_date,
            end_date=payload.end_date,
            price_override=payload.price_override,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
