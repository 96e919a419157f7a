"""Client for the external payment confirmation API."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import settings
from app.services.errors import PaymentConfirmationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentConfirmation:
    order_id: str
    amount: int
    receipt: Any


def basic_auth_header(secret_key: str) -> str:
    token = base64.b64encode(f"{secret_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _response_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def confirm_payment(*, payment_key: str, order_id: str, amount: int, client: httpx.Client | None = None) -> PaymentConfirmation:
    """Ask the gateway to capture an authorized payment.

    Raises ``PaymentConfirmationError`` on a non-2xx answer or transport error.
    """
    payload = {"paymentKey": payment_key, "orderId": order_id, "amount": amount}
    headers = {"Authorization": basic_auth_header(settings.toss_secret_key)}

    try:
        if client is not None:
            response = client.post(settings.toss_confirm_url, json=payload, headers=headers)
        else:
            with httpx.Client(timeout=settings.http_timeout_seconds) as c:
                response = c.post(settings.toss_confirm_url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("[PAYMENT] Gateway unreachable for %s: %s", order_id, exc)
        raise PaymentConfirmationError("confirm_failed", detail=str(exc)) from exc

    if not response.is_success:
        detail = _response_detail(response)
        logger.warning("[PAYMENT] Gateway rejected %s (HTTP %s)", order_id, response.status_code)
        raise PaymentConfirmationError("confirm_failed", detail=detail)

    return PaymentConfirmation(order_id=order_id, amount=amount, receipt=_response_detail(response))
