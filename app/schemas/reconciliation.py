"""Schemas for reconciliation, weekly summary and print views."""

from datetime import date as dt_date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApplicantRangeRead(BaseModel):
    id: int
    name: str
    code: str
    applied_count: int
    paid_count: int
    total_amount: int
    paid: bool

    model_config = ConfigDict(from_attributes=True)


class SlotStateRead(BaseModel):
    applied: bool
    paid: bool

    model_config = ConfigDict(from_attributes=True)


class DailyApplicantRead(BaseModel):
    id: int
    name: str
    code: str
    lunch: SlotStateRead
    dinner: SlotStateRead

    model_config = ConfigDict(from_attributes=True)


class MarkRangeRequest(BaseModel):
    start: dt_date
    end: dt_date
    items: list[dict[str, Any]] = Field(default_factory=list)


class MarkDateRequest(BaseModel):
    date: dt_date
    items: list[dict[str, Any]] = Field(default_factory=list)


class MarkResponse(BaseModel):
    ok: bool = True
    updated: int
    skipped: int


class WeeklySummaryResponse(BaseModel):
    start: dt_date
    end: dt_date
    days: list[dt_date]
    rows: list[dict[str, Any]]
    applied: list[dict[str, Any]]
    not_applied: list[dict[str, Any]]


class PrintEntryRead(BaseModel):
    id: int
    name: str
    code: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class PrintViewResponse(BaseModel):
    ok: bool = True
    date: dt_date
    lunch: list[PrintEntryRead]
    dinner: list[PrintEntryRead]
    counts: dict[str, int]
