"""Request-scoped correlation ids for log entries.

The HTTP middleware sets these at the start of a request and clears them at
the end, so every log line emitted while answering one call carries the same
``request_id`` and ``client_id``.
"""
from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

import structlog

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_client_id: ContextVar[str | None] = ContextVar("client_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"
CLIENT_ID_HEADER = "X-Client-ID"


def _generate_id() -> str:
    return uuid.uuid4().hex[:8]


def get_request_id() -> str | None:
    return _request_id.get()


def get_client_id() -> str | None:
    return _client_id.get()


def set_request_id(request_id: str | None = None) -> str:
    """Store ``request_id`` in context, generating one when absent."""
    rid = request_id or _generate_id()
    _request_id.set(rid)
    return rid


def set_client_id(client_id: str | None = None) -> str:
    """Store ``client_id`` in context, generating one when absent."""
    cid = client_id or _generate_id()
    _client_id.set(cid)
    return cid


def clear_request_context() -> None:
    _request_id.set(None)
    _client_id.set(None)
    structlog.contextvars.clear_contextvars()


def bind_request_context(**context: Any) -> None:
    """Attach fields to every subsequent log entry in this context.

    Example:
        bind_request_context(user_id=str(user.id), operation="get_score")
    """
    structlog.contextvars.bind_contextvars(**context)
