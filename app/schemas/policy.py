"""Schemas for the global policy, effective policy and blackout days."""

from datetime import date as dt_date

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PolicyRead(BaseModel):
    base_price: int
    allowed_weekdays: str
    start_date: dt_date | None = None
    end_date: dt_date | None = None
    sms_extra_text: str | None = None


class PolicyUpdateRequest(BaseModel):
    base_price: int = Field(ge=0)
    allowed_weekdays: str | list[str] | None = None
    start_date: dt_date | None = None
    end_date: dt_date | None = None
    sms_extra_text: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return _blank_to_none(value)


class BlackoutRead(BaseModel):
    id: int
    date: dt_date
    slot: str

    model_config = ConfigDict(from_attributes=True)


class BlackoutCreate(BaseModel):
    date: dt_date
    slot: str = "BOTH"


class StudentIdentity(BaseModel):
    id: int
    name: str
    code: str


class ActivePolicyResponse(BaseModel):
    base_price: int
    allowed_weekdays: list[str]
    start_date: dt_date | None = None
    end_date: dt_date | None = None
    no_service_days: list[BlackoutRead]
    student: StudentIdentity
    sms_extra_text: str | None = None
    selectable: list[dict] = Field(default_factory=list)
