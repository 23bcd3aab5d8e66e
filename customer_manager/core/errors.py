from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class RecordError(Exception):
    """Base class for failures rendered as ``{"error": ...}``."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, *, fields: Optional[Dict[str, str]] = None) -> None:
        self.message = message or self.default_message
        self.fields = fields or {}
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.fields:
            payload["fields"] = self.fields
        return payload


class ValidationError(RecordError):
    default_message = "Invalid request"


class DuplicatePhoneError(RecordError):
    default_message = "Phone number already exists"


class NotFoundError(RecordError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


class StoreError(RecordError):
    default_message = "Database error"

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> "StoreError":
        return cls(store_error_message(exc))


def store_error_message(exc: SQLAlchemyError) -> str:
    """Driver message without SQLAlchemy's statement/parameters suffix."""
    orig = getattr(exc, "orig", None)
    if orig is not None:
        return str(orig)
    return str(exc)


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    message = store_error_message(exc).lower()
    return "unique" in message or "duplicate key" in message


def _describe_request_validation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def _record_error_handler(request: Request, exc: RecordError) -> JSONResponse:
    log = logger.warning if isinstance(exc, StoreError) else logger.info
    log(
        "request failed error=%s message=%s",
        type(exc).__name__,
        exc.message,
        extra={"endpoint": request.url.path, "method": request.method, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(_describe_request_validation(exc))
    return await _record_error_handler(request, error)


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return await _record_error_handler(request, StoreError.from_exception(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordError, _record_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)
