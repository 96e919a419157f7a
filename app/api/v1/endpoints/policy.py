"""Policy, per-student effective policy and blackout day endpoints."""

from dataclasses import replace
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.models import Blackout
from app.schemas.auth import OkResponse
from app.schemas.policy import (
    ActivePolicyResponse,
    BlackoutCreate,
    BlackoutRead,
    PolicyRead,
    PolicyUpdateRequest,
    StudentIdentity,
)
from app.services import policy_service
from app.utils.weekdays import format_weekdays, ordered_weekdays

router: APIRouter = APIRouter()
admin_router: APIRouter = APIRouter()


def _policy_read(policy: policy_service.PolicySettings) -> PolicyRead:
    return PolicyRead(
        base_price=policy.base_price,
        allowed_weekdays=format_weekdays(policy.allowed_weekdays),
        start_date=policy.start_date,
        end_date=policy.end_date,
        sms_extra_text=policy.sms_extra_text,
    )


@router.get("/policy/active", response_model=ActivePolicyResponse)
def active_policy(code: str | None = Query(default=None), db: Session = Depends(get_db)) -> ActivePolicyResponse:
    """Effective ordering policy for one student, including selectable slots."""
    if not code or not code.strip():
        raise HTTPException(status_code=400, detail={"error": "CODE_REQUIRED", "message": "code is required"})
    try:
        effective = policy_service.resolve_effective_policy(db, code)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc

    slots = policy_service.selectable_slots(effective, today=date.today())
    return ActivePolicyResponse(
        base_price=effective.base_price,
        allowed_weekdays=ordered_weekdays(effective.allowed_weekdays),
        start_date=effective.start_date,
        end_date=effective.end_date,
        no_service_days=[BlackoutRead(id=day.id, date=day.date, slot=day.slot) for day in effective.blackouts],
        student=StudentIdentity(id=effective.student_id, name=effective.student_name, code=effective.student_code),
        sms_extra_text=effective.sms_extra_text,
        selectable=[{"date": slot_date, "slot": slot} for slot_date, slot in slots],
    )


@admin_router.get("/policy", response_model=PolicyRead)
def get_policy(db: Session = Depends(get_db)) -> PolicyRead:
    return _policy_read(policy_service.load_policy(db))


@admin_router.post("/policy", response_model=PolicyRead)
def update_policy(payload: PolicyUpdateRequest, db: Session = Depends(get_db)) -> PolicyRead:
    """Save the global policy. Omitted weekdays keep the stored set."""
    try:
        current = policy_service.load_policy(db)
        weekdays = current.allowed_weekdays
        if payload.allowed_weekdays is not None:
            weekdays = policy_service.parse_weekday_input(payload.allowed_weekdays)
        updated = replace(
            current,
            base_price=payload.base_price,
            allowed_weekdays=weekdays,
            start_date=payload.start_date,
            end_date=payload.end_date,
            sms_extra_text=payload.sms_extra_text,
        )
        return _policy_read(policy_service.save_policy(db, updated))
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@admin_router.get("/no-service-days", response_model=list[BlackoutRead])
def list_no_service_days(db: Session = Depends(get_db)) -> list[BlackoutRead]:
    return [BlackoutRead(id=day.id, date=day.date, slot=day.slot) for day in policy_service.list_blackouts(db)]


@admin_router.post("/no-service-days", response_model=BlackoutRead)
def add_no_service_day(payload: BlackoutCreate, db: Session = Depends(get_db)) -> Blackout:
    try:
        return policy_service.add_blackout(db, payload.date, payload.slot)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc


@admin_router.delete("/no-service-days/{blackout_id}", response_model=OkResponse)
def delete_no_service_day(blackout_id: int, db: Session = Depends(get_db)) -> OkResponse:
    try:
        policy_service.delete_blackout(db, blackout_id)
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return OkResponse()
