"""Request id shared with log records emitted while a request is handled."""
from __future__ import annotations

from contextvars import ContextVar

_current_request_id: ContextVar[str | None] = ContextVar("customer_manager_request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _current_request_id.set(request_id)


def get_request_id() -> str | None:
    return _current_request_id.get()


def clear_request_context() -> None:
    set_request_id(None)
