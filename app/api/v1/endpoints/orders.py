"""Order endpoints for students and administrators."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.schemas.order import (
    AdminOrdersResponse,
    CancelStudentRequest,
    CommitRequest,
    CommitResponse,
    DeletedResponse,
    OrderRead,
    ResetOrdersRequest,
    StudentOrdersResponse,
)
from app.services import order_service

router: APIRouter = APIRouter()
admin_router: APIRouter = APIRouter()


@router.post("/orders/commit", response_model=CommitResponse)
def commit_orders(payload: CommitRequest, db: Session = Depends(get_db)) -> CommitResponse:
    """Record the selected meal slots of a student as SELECTED orders."""
    if not payload.code.strip():
        raise HTTPException(status_code=400, detail={"error": "CODE_REQUIRED", "message": "code is required"})
    if not payload.items:
        raise HTTPException(status_code=400, detail={"error": "ITEMS_REQUIRED", "message": "items must not be empty"})
    try:
        result = order_service.commit_selection(db, payload.code, payload.items)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return CommitResponse(
        inserted=result.inserted,
        skipped_duplicates=result.skipped_duplicates,
        skipped_invalid=result.skipped_invalid,
    )


@router.get("/student/orders/{code}", response_model=StudentOrdersResponse)
def student_orders(code: str, db: Session = Depends(get_db)) -> StudentOrdersResponse:
    try:
        student, orders = order_service.list_student_orders(db, code)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return StudentOrdersResponse(
        student={"id": student.id, "name": student.name, "code": student.code},
        orders=[OrderRead.model_validate(order) for order in orders],
    )


@admin_router.get("/orders", response_model=AdminOrdersResponse)
def admin_orders(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    q: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> AdminOrdersResponse:
    rows, groups = order_service.list_orders(db, start=start, end=end, query=q)
    return AdminOrdersResponse(rows=rows, groups=groups)


@admin_router.delete("/orders/{order_id}", response_model=DeletedResponse)
def delete_order(order_id: int, db: Session = Depends(get_db)) -> DeletedResponse:
    return DeletedResponse(deleted=order_service.cancel_order(db, order_id))


@admin_router.post("/orders/cancel-student", response_model=DeletedResponse)
def cancel_student(payload: CancelStudentRequest, db: Session = Depends(get_db)) -> DeletedResponse:
    """Delete a student's orders in a date range, paid or not."""
    slot = (payload.slot or "").strip().upper() or None
    try:
        deleted = order_service.cancel_student_orders(db, payload.code, start=payload.start, end=payload.end, slot=slot)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return DeletedResponse(deleted=deleted)


@admin_router.post("/reset-orders", response_model=DeletedResponse)
def reset_orders(payload: ResetOrdersRequest | None = None, db: Session = Depends(get_db)) -> DeletedResponse:
    if payload is None or payload.confirm is not True:
        raise HTTPException(status_code=400, detail={"error": "CONFIRM_REQUIRED", "message": "Send confirm=true to delete all orders"})
    return DeletedResponse(deleted=order_service.reset_all_orders(db))
