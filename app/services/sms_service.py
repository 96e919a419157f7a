"""Order summary text messages sent through the SMS gateway."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from datetime import date, datetime, timezone
from typing import Any

import httpx
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.errors import SmsSendError, ValidationError
from app.services.policy_service import MEAL_SLOTS, get_student_by_code, load_policy

logger = logging.getLogger(__name__)

SMS_TITLE = "[메디컬로드맵 도시락 신청]"
POLICY_TEXT_LIMIT = 700
KOREAN_WEEKDAYS = ("월", "화", "수", "목", "금", "토", "일")
SLOT_LABELS = {"LUNCH": "점심", "DINNER": "저녁"}


def only_digits(value: str | None) -> str:
    return re.sub(r"\D", "", value or "")


def create_hmac_auth_header(api_key: str, api_secret: str, *, now: datetime | None = None, salt: str | None = None) -> str:
    """Build the gateway's HMAC-SHA256 Authorization header."""
    signed_at = (now or datetime.now(timezone.utc)).isoformat()
    salt = salt or secrets.token_hex(16)
    signature = hmac.new(api_secret.encode("utf-8"), (signed_at + salt).encode("utf-8"), hashlib.sha256).hexdigest()
    return f"HMAC-SHA256 apiKey={api_key}, date={signed_at}, salt={salt}, signature={signature}"


def _month_day(value: str) -> str:
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed.month}/{parsed.day}"


def _weekday_label(value: str) -> str:
    try:
        return KOREAN_WEEKDAYS[date.fromisoformat(value).weekday()]
    except ValueError:
        return ""


def _total_amount(items: list[dict[str, Any]], total: Any) -> int:
    if total is not None and total != "":
        try:
            return int(float(total))
        except (TypeError, ValueError):
            pass
    amount = 0
    for item in items:
        try:
            amount += int(float(item.get("price") or 0))
        except (TypeError, ValueError):
            continue
    return amount


def build_summary_text(
    *,
    student_name: str,
    items: list[dict[str, Any]],
    total: Any = None,
    policy_text: str | None = None,
) -> str:
    """Render the order summary message.

    (date, slot) pairs are de-duplicated and grouped per date. The amount is the
    client-provided total when it is numeric, otherwise the sum of item prices.
    """
    by_date: dict[str, set[str]] = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("date"):
            continue
        slot = str(item.get("slot") or "").upper()
        if slot not in MEAL_SLOTS:
            continue
        by_date.setdefault(str(item["date"]), set()).add(slot)

    ordered_dates = sorted(by_date)
    meal_count = sum(len(slots) for slots in by_date.values())

    period = "-"
    if ordered_dates:
        first, last = ordered_dates[0], ordered_dates[-1]
        period = _month_day(first) if first == last else f"{_month_day(first)}~{_month_day(last)}"

    lines = []
    for day in ordered_dates:
        labels = [SLOT_LABELS[slot] for slot in MEAL_SLOTS if slot in by_date[day]]
        lines.append(f"{_month_day(day)}({_weekday_label(day)}) {', '.join(labels)}")

    text = (
        f"{SMS_TITLE}\n\n"
        f"※ {student_name.strip()}학생\n"
        f"- 기간: {period}\n"
        f"- 식수: {meal_count}식\n"
        f"- 비용: {_total_amount(items, total):,}원\n"
    )
    extra = (policy_text or "").strip()
    if extra:
        text += f"\n\n※ 입금 계좌\n{extra[:POLICY_TEXT_LIMIT]}\n"
    text += "\n\n※ 신청내역\n" + ("\n".join(lines) or "-")
    return text


def send_summary(
    db: Session,
    *,
    to: str,
    code: str,
    items: list[dict[str, Any]],
    total: Any = None,
    name: str | None = None,
    client: httpx.Client | None = None,
) -> Any:
    """Send the order summary to ``to`` and return the gateway response body."""
    student = get_student_by_code(db, code)
    policy = load_policy(db)

    destination = only_digits(to)
    sender = only_digits(settings.coolsms_sender)
    if not sender:
        raise ValidationError("SMS sender number is not configured", code="MISSING_SENDER")
    if len(destination) < 9:
        raise ValidationError("Destination number is too short", code="INVALID_TO_NUMBER")
    if not settings.coolsms_api_key or not settings.coolsms_api_secret:
        raise ValidationError("SMS API keys are not configured", code="MISSING_API_KEYS")

    text = build_summary_text(
        student_name=(name or student.name or ""),
        items=items,
        total=total,
        policy_text=policy.sms_extra_text,
    )
    payload = {"message": {"to": destination, "from": sender, "text": text}}
    headers = {
        "Authorization": create_hmac_auth_header(settings.coolsms_api_key, settings.coolsms_api_secret),
        "Content-Type": "application/json",
    }

    try:
        if client is not None:
            response = client.post(settings.sms_api_url, json=payload, headers=headers)
        else:
            with httpx.Client(timeout=settings.http_timeout_seconds) as c:
                response = c.post(settings.sms_api_url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("[SMS] Gateway unreachable: %s", exc)
        raise SmsSendError("sms_failed", detail=str(exc)) from exc

    try:
        body = response.json()
    except ValueError:
        body = response.text
    if not response.is_success:
        logger.warning("[SMS] Gateway rejected summary for %s (HTTP %s)", student.code, response.status_code)
        raise SmsSendError("sms_failed", detail=body)

    logger.info("[SMS] Summary sent for %s", student.code)
    return body
