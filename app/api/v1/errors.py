"""Translation of service exceptions into HTTP errors."""

from fastapi import HTTPException

from app.services.errors import (
    DuplicateStudentCodeError,
    ExternalServiceError,
    RecordNotFoundError,
    StudentNotFoundError,
    ValidationError,
)

DOMAIN_ERRORS = (
    ValidationError,
    StudentNotFoundError,
    RecordNotFoundError,
    DuplicateStudentCodeError,
    ExternalServiceError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a domain exception raised by a service to the HTTP response it implies."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail={"error": exc.code, "message": str(exc)})
    if isinstance(exc, StudentNotFoundError):
        return HTTPException(status_code=404, detail={"error": "STUDENT_NOT_FOUND", "message": str(exc)})
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail={"error": "NOT_FOUND", "message": str(exc)})
    if isinstance(exc, DuplicateStudentCodeError):
        return HTTPException(status_code=409, detail={"error": "DUPLICATE_CODE", "message": str(exc)})
    if isinstance(exc, ExternalServiceError):
        return HTTPException(status_code=502, detail={"error": str(exc), "detail": exc.detail})
    return HTTPException(status_code=500, detail="Internal error")
