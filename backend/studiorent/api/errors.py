"""Translate engine errors into HTTP errors the booking wizard can display.

Every error body has the shape ``{"error", "errorAr", "field"?, "errors"?}``.
"""

from fastapi import HTTPException, status

from studiorent.engine.errors import ConflictError, ValidationError


def validation_http_error(exc: ValidationError) -> HTTPException:
    """400 with the first message as the headline and every field error listed."""
    first = exc.errors[0] if exc.errors else None
    detail = {
        "error": first.message if first else "Validation failed",
        "errorAr": first.message_ar if first else "فشل التحقق",
        "errors": [e.to_dict() for e in exc.errors],
    }
    if first is not None:
        detail["field"] = first.field
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def conflict_http_error(exc: ConflictError) -> HTTPException:
    detail = {
        "error": exc.message,
        "errorAr": exc.message_ar,
        "field": exc.field,
    }
    if exc.conflict_date is not None:
        detail["conflictDate"] = exc.conflict_date.isoformat()
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
