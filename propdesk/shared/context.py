"""Request context management using contextvars.

Async-safe storage for request-scoped data read by logging.

Usage:
    token = set_request_id("abc123")
    try:
        ...
    finally:
        reset_request_id(token)
"""

from contextvars import ContextVar, Token

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> Token:
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def get_request_id() -> str | None:
    """Request id of the current request, or None outside a request."""
    return _request_id.get()
