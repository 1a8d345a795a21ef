"""
Logging filters.

- RequestIdFilter stamps `record.request_id` from a contextvar so every
  formatter can reference `%(request_id)s` safely ("-" outside a request).
- RedactFilter masks record attributes whose names look like secrets
  (passed through `extra={...}`).

The request id lives in a `contextvars.ContextVar`, which follows asyncio
tasks across `await` boundaries; `threading.local()` would leak between
concurrent requests served on the same thread.
"""

import contextvars
import logging
from logging import LogRecord

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id for the current context; returns a token for `reset_request_id`."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee a `request_id` attribute on every record.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar,
    then "-". Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None) or get_request_id() or "-"
        return True


class RedactFilter(logging.Filter):
    """Replace the value of sensitive record attributes with a fixed mask."""

    MASK = "***REDACTED***"
    SENSITIVE = frozenset({
        "password",
        "postgres_password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    })

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True


__all__ = [
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "RequestIdFilter",
    "RedactFilter",
]
