"""Order summary SMS endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.errors import DOMAIN_ERRORS, to_http_exception
from app.db.session import get_db
from app.schemas.sms import SmsSummaryRequest, SmsSummaryResponse
from app.services import sms_service

router: APIRouter = APIRouter()


@router.post("/sms/summary", response_model=SmsSummaryResponse)
def send_sms_summary(payload: SmsSummaryRequest, db: Session = Depends(get_db)) -> SmsSummaryResponse:
    """Text the order summary; a gateway failure leaves committed orders as they are."""
    try:
        result = sms_service.send_summary(
            db,
            to=payload.to,
            code=payload.code,
            items=payload.items,
            total=payload.total,
            name=payload.name,
        )
    except DOMAIN_ERRORS as exc:
        raise to_http_exception(exc) from exc
    return SmsSummaryResponse(result=result)
