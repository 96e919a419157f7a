"""Payment gateway client and confirmation endpoint tests."""

import base64
import json
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db import session as db_session
from app.db.base import Base
from app.main import app
from app.models import Order, Student
from app.services import order_service, payment_gateway
from app.services.errors import PaymentConfirmationError


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_confirm_payment_sends_basic_auth(monkeypatch) -> None:
    monkeypatch.setattr(settings, "toss_secret_key", "test_sk")
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "DONE", "orderId": "ord-1"})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        confirmation = payment_gateway.confirm_payment(payment_key="pk", order_id="ord-1", amount=18000, client=client)

    assert seen["auth"] == "Basic " + base64.b64encode(b"test_sk:").decode("ascii")
    assert seen["body"] == {"paymentKey": "pk", "orderId": "ord-1", "amount": 18000}
    assert confirmation.receipt == {"status": "DONE", "orderId": "ord-1"}


def test_confirm_payment_raises_with_upstream_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "ALREADY_PROCESSED_PAYMENT"})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(PaymentConfirmationError) as exc_info:
            payment_gateway.confirm_payment(payment_key="pk", order_id="ord-1", amount=1, client=client)

    assert exc_info.value.detail == {"code": "ALREADY_PROCESSED_PAYMENT"}


def test_confirm_payment_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(PaymentConfirmationError):
            payment_gateway.confirm_payment(payment_key="pk", order_id="ord-1", amount=1, client=client)


@pytest.fixture
def api(tmp_path: Path, monkeypatch):
    engine = _build_test_engine(tmp_path / "test_payments.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        db.add(Student(code="abc123", name="Kim"))
        db.commit()
        order_service.commit_selection(
            db,
            "abc123",
            [{"date": "2025-09-01", "slot": "LUNCH"}, {"date": "2025-09-01", "slot": "DINNER"}],
        )

    with TestClient(app) as client:
        yield client, testing_session_local


def _confirm_body(code: str) -> dict:
    return {
        "paymentKey": "pk",
        "orderId": "ord-1",
        "amount": 9000,
        "code": code,
        "dateslots": [{"date": "2025-09-01", "slot": "LUNCH"}],
    }


def test_confirm_endpoint_marks_paid(api, monkeypatch) -> None:
    client, session_local = api
    monkeypatch.setattr(
        order_service,
        "confirm_payment",
        lambda **kwargs: payment_gateway.PaymentConfirmation(order_id=kwargs["order_id"], amount=kwargs["amount"], receipt={"ok": 1}),
    )

    response = client.post("/api/payments/toss/confirm", json=_confirm_body("abc123"))

    assert response.status_code == 200
    assert response.json() == {"ok": True, "receipt": {"ok": 1}, "student_found": True, "updated": 1}
    with session_local() as db:
        statuses = {row.slot: row.status for row in db.scalars(select(Order)).all()}
    assert statuses == {"LUNCH": "PAID", "DINNER": "SELECTED"}


def test_confirm_endpoint_reports_gateway_failure_as_502(api, monkeypatch) -> None:
    client, session_local = api

    def failing_confirm(**kwargs):
        raise PaymentConfirmationError("confirm_failed", detail={"code": "REJECT_CARD_COMPANY"})

    monkeypatch.setattr(order_service, "confirm_payment", failing_confirm)

    response = client.post("/api/payments/toss/confirm", json=_confirm_body("abc123"))

    assert response.status_code == 502
    assert response.json()["detail"] == {"error": "confirm_failed", "detail": {"code": "REJECT_CARD_COMPANY"}}
    with session_local() as db:
        assert {row.status for row in db.scalars(select(Order)).all()} == {"SELECTED"}


def test_confirm_endpoint_reports_unknown_student_after_charge(api, monkeypatch) -> None:
    client, _ = api
    monkeypatch.setattr(
        order_service,
        "confirm_payment",
        lambda **kwargs: payment_gateway.PaymentConfirmation(order_id="ord-1", amount=9000, receipt={}),
    )

    response = client.post("/api/payments/toss/confirm", json=_confirm_body("ghost"))

    assert response.status_code == 200
    assert response.json()["student_found"] is False
    assert response.json()["updated"] == 0


def test_confirm_endpoint_requires_fields(api, monkeypatch) -> None:
    client, _ = api
    called = []
    monkeypatch.setattr(order_service, "confirm_payment", lambda **kwargs: called.append(kwargs))

    response = client.post("/api/payments/toss/confirm", json={"orderId": "ord-1", "amount": 9000})

    assert response.status_code == 400
    assert called == []
