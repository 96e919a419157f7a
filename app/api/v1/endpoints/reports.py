"""Admin reconciliation and print views."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.reconciliation import (
    ApplicantRangeRead,
    DailyApplicantRead,
    PrintEntryRead,
    PrintViewResponse,
    WeeklySummaryResponse,
)
from app.services import reconciliation_service
from app.services.pdf_exports import render_print_sheet_pdf

admin_router: APIRouter = APIRouter()


@admin_router.get("/weekly-summary", response_model=WeeklySummaryResponse)
def weekly_summary(start: date = Query(...), end: date = Query(...), db: Session = Depends(get_db)) -> WeeklySummaryResponse:
    return WeeklySummaryResponse(**reconciliation_service.weekly_summary(db, start, end))


@admin_router.get("/applicants-range", response_model=list[ApplicantRangeRead])
def applicants_range(start: date = Query(...), end: date = Query(...), db: Session = Depends(get_db)) -> list[ApplicantRangeRead]:
    """Per-student applied/paid counts for an inclusive date range."""
    return [ApplicantRangeRead.model_validate(row) for row in reconciliation_service.applicants_range(db, start, end)]


@admin_router.get("/applicants", response_model=list[DailyApplicantRead])
def applicants(date: date = Query(...), db: Session = Depends(get_db)) -> list[DailyApplicantRead]:
    return [DailyApplicantRead.model_validate(row) for row in reconciliation_service.applicants_for_date(db, date)]


@admin_router.get("/print", response_model=PrintViewResponse)
def print_view(date: date = Query(...), db: Session = Depends(get_db)) -> PrintViewResponse:
    view = reconciliation_service.print_view(db, date)
    return PrintViewResponse(
        date=view.date,
        lunch=[PrintEntryRead.model_validate(entry) for entry in view.lunch],
        dinner=[PrintEntryRead.model_validate(entry) for entry in view.dinner],
        counts=view.counts,
    )


@admin_router.get("/print.pdf")
def print_pdf(date: date = Query(...), db: Session = Depends(get_db)) -> Response:
    view = reconciliation_service.print_view(db, date)
    return Response(
        content=render_print_sheet_pdf(view),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="print_{view.date.isoformat()}.pdf"'},
    )


@admin_router.get("/attendance.csv")
def attendance_csv(date: date = Query(...), db: Session = Depends(get_db)) -> Response:
    return Response(
        content=reconciliation_service.attendance_csv(db, date),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="attendance_{date.isoformat()}.csv"'},
    )
