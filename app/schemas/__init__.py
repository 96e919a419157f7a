"""Schema exports."""

from app.schemas.auth import AdminMeResponse, LoginRequest, OkResponse
from app.schemas.menu_image import MenuImageRead
from app.schemas.order import (
    AdminOrdersResponse,
    CancelStudentRequest,
    CommitRequest,
    CommitResponse,
    DeletedResponse,
    OrderRead,
    PaymentConfirmRequest,
    PaymentConfirmResponse,
    ResetOrdersRequest,
    StudentOrdersResponse,
)
from app.schemas.policy import ActivePolicyResponse, BlackoutCreate, BlackoutRead, PolicyRead, PolicyUpdateRequest
from app.schemas.reconciliation import (
    ApplicantRangeRead,
    DailyApplicantRead,
    MarkDateRequest,
    MarkRangeRequest,
    MarkResponse,
    PrintViewResponse,
    WeeklySummaryResponse,
)
from app.schemas.sms import SmsSummaryRequest, SmsSummaryResponse
from app.schemas.student import (
    BulkUpsertRequest,
    BulkUpsertResponse,
    CsvImportResponse,
    ExcelImportResponse,
    ExcelPreviewResponse,
    StudentPolicyRequest,
    StudentRead,
    StudentWrite,
)

__all__ = [
    "AdminMeResponse",
    "LoginRequest",
    "OkResponse",
    "MenuImageRead",
    "AdminOrdersResponse",
    "CancelStudentRequest",
    "CommitRequest",
    "CommitResponse",
    "DeletedResponse",
    "OrderRead",
    "PaymentConfirmRequest",
    "PaymentConfirmResponse",
    "ResetOrdersRequest",
    "StudentOrdersResponse",
    "ActivePolicyResponse",
    "BlackoutCreate",
    "BlackoutRead",
    "PolicyRead",
    "PolicyUpdateRequest",
    "ApplicantRangeRead",
    "DailyApplicantRead",
    "MarkDateRequest",
    "MarkRangeRequest",
    "MarkResponse",
    "PrintViewResponse",
    "WeeklySummaryResponse",
    "SmsSummaryRequest",
    "SmsSummaryResponse",
    "BulkUpsertRequest",
    "BulkUpsertResponse",
    "CsvImportResponse",
    "ExcelImportResponse",
    "ExcelPreviewResponse",
    "StudentPolicyRequest",
    "StudentRead",
    "StudentWrite",
]
