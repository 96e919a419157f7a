"""Payment confirmation and admin payment marking endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.schemas.order import PaymentConfirmRequest, PaymentConfirmResponse
from app.schemas.reconciliation import MarkDateRequest, MarkRangeRequest, MarkResponse
from app.services import order_service, reconciliation_service

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter()
admin_router: APIRouter = APIRouter()


@router.post("/payments/toss/confirm", response_model=PaymentConfirmResponse)
def confirm_toss_payment(payload: PaymentConfirmRequest, db: Session = Depends(get_db)) -> PaymentConfirmResponse:
    """Confirm a payment with the gateway, then mark the paid slots as PAID.

    A gateway failure answers 502 with the upstream detail; missing fields
    answer 400 without contacting the gateway.
    """
    if not payload.payment_key or not payload.order_id or not payload.amount:
        raise HTTPException(status_code=400, detail={"error": "MISSING_FIELDS", "message": "paymentKey, orderId and amount are required"})
    try:
        result = order_service.confirm_payment_and_mark_paid(
            db,
            payment_key=payload.payment_key,
            order_id=payload.order_id,
            amount=payload.amount,
            code=payload.code,
            raw_dateslots=payload.dateslots,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return PaymentConfirmResponse(receipt=result.receipt, student_found=result.student_found, updated=result.updated)


@admin_router.post("/payments/mark-range", response_model=MarkResponse)
def mark_range(payload: MarkRangeRequest, db: Session = Depends(get_db)) -> MarkResponse:
    result = reconciliation_service.mark_range(db, payload.start, payload.end, payload.items)
    return MarkResponse(updated=result.updated, skipped=result.skipped)


@admin_router.post("/payments/mark", response_model=MarkResponse)
def mark_date(payload: MarkDateRequest, db: Session = Depends(get_db)) -> MarkResponse:
    result = reconciliation_service.mark_date(db, payload.date, payload.items)
    return MarkResponse(updated=result.updated, skipped=result.skipped)
