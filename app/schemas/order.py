"""Order ledger and payment request/response schemas."""

from datetime import date as dt_date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class CommitRequest(BaseModel):
    """Selections are validated by the ledger so partial items can be counted."""

    code: str
    items: list[Any] = Field(default_factory=list)


class CommitResponse(BaseModel):
    ok: bool = True
    inserted: int
    skipped_duplicates: int
    skipped_invalid: int


class PaymentConfirmRequest(BaseModel):
    payment_key: str = Field(default="", alias="paymentKey")
    order_id: str = Field(default="", alias="orderId")
    amount: int | None = None
    code: str | None = None
    dateslots: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class PaymentConfirmResponse(BaseModel):
    ok: bool = True
    receipt: Any = None
    student_found: bool
    updated: int


class OrderRead(BaseModel):
    id: int
    date: dt_date
    slot: str
    price: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class StudentOrdersResponse(BaseModel):
    student: dict[str, Any]
    orders: list[OrderRead]


class AdminOrderRow(OrderRead):
    student_id: int
    name: str
    code: str


class AdminOrderGroup(BaseModel):
    student_id: int
    name: str
    code: str
    count: int
    total_amount: int
    items: list[OrderRead]


class AdminOrdersResponse(BaseModel):
    rows: list[AdminOrderRow]
    groups: list[AdminOrderGroup]


class CancelStudentRequest(BaseModel):
    code: str
    start: dt_date | None = None
    end: dt_date | None = None
    slot: str | None = None


class DeletedResponse(BaseModel):
    ok: bool = True
    deleted: int


class ResetOrdersRequest(BaseModel):
    confirm: StrictBool = False
