"""Schemas for the student roster."""

from datetime import date as dt_date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StudentRead(BaseModel):
    id: int
    code: str
    name: str
    phone: str | None = None
    parent_phone: str | None = None
    allowed_weekdays: str | None = None
    start_date: dt_date | None = None
    end_date: dt_date | None = None
    price_override: int | None = None

    model_config = ConfigDict(from_attributes=True)


class StudentWrite(BaseModel):
    name: str = ""
    code: str = ""
    phone: str | None = None
    parent_phone: str | None = None


class BulkUpsertRequest(BaseModel):
    students: list[dict] = Field(default_factory=list)


class BulkUpsertResponse(BaseModel):
    ok: bool = True
    inserted: int
    updated: int


class StudentPolicyRequest(BaseModel):
    """Per-student override; empty values clear the override."""

    allowed_weekdays: str | list[str] | None = None
    start_date: dt_date | None = None
    end_date: dt_date | None = None
    price_override: int | None = None

    @field_validator("start_date", "end_date", "price_override", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CsvImportResponse(BaseModel):
    imported: int


class RosterRowRead(BaseModel):
    name: str
    code: str
    student_phone: str
    parent_phone: str

    model_config = ConfigDict(from_attributes=True)


class ExcelPreviewResponse(BaseModel):
    ok: bool = True
    students: list[RosterRowRead]


class ExcelImportResponse(BaseModel):
    ok: bool = True
    imported: int
    skipped_existing: list[dict[str, str]]
    skipped_code_conflict: list[dict[str, str]]
