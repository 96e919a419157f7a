"""Domain exceptions raised by services and translated to HTTP by routers."""

from __future__ import annotations

from typing import Any


class ValidationError(Exception):
    """Request data is missing or malformed; nothing was changed."""

    def __init__(self, message: str, code: str = "INVALID_PAYLOAD") -> None:
        super().__init__(message)
        self.code = code


class StudentNotFoundError(LookupError):
    """No student exists with the given code or id."""

    def __init__(self, key: str | int) -> None:
        super().__init__(f"Student not found: {key}")
        self.key = key


class RecordNotFoundError(LookupError):
    """A single row addressed by id does not exist."""


class DuplicateStudentCodeError(Exception):
    """Another student already uses the requested code."""


class ExternalServiceError(Exception):
    """An upstream gateway rejected the request or could not be reached."""

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.detail = detail if detail is not None else message


class PaymentConfirmationError(ExternalServiceError):
    """The payment gateway did not confirm the payment."""


class SmsSendError(ExternalServiceError):
    """The SMS gateway did not accept the message."""
