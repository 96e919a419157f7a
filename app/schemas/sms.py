"""SMS summary schemas."""

from typing import Any

from pydantic import BaseModel, Field


class SmsSummaryRequest(BaseModel):
    to: str
    code: str
    items: list[Any] = Field(default_factory=list)
    total: Any = None
    name: str | None = None


class SmsSummaryResponse(BaseModel):
    ok: bool = True
    result: Any = None
