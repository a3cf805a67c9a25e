# src/bookstore/core/logging/filters.py
"""
Request ID filter and helpers.

The request id lives in a `contextvars.ContextVar` so that it follows a request
across `await` boundaries. `RequestIDMiddleware` sets it at the start of every
HTTP request; `RequestIdFilter` copies it onto each LogRecord so formatters can
render `%(request_id)s` without a KeyError.
"""

import logging
from logging import LogRecord
import contextvars

# None means "no request in progress" (startup, shutdown, background work).
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """
    Set the request id in the current context.

    Returns:
        Token: pass it to `reset_request_id()` to restore the previous value.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee that every LogRecord has a `request_id` attribute.

    Precedence:
      1. a value passed explicitly through `extra={"request_id": ...}`
      2. the contextvar set by the middleware
      3. the sentinel "-"

    Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """Mask `extra` attributes whose key names a credential."""

    SENSITIVE = {"password", "postgres_password", "secret", "token", "authorization"}

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        return True
