"""
App-level exceptions raised by the repository layer and rendered by the API.

Each exception carries a canonical `error_code`. The code decides both the HTTP
status and the client-facing message, so every error of a kind produces exactly
the same response body:

    {"error": "<client message>"}

The detailed `message` (ids, constraint names, driver text) is for logs only.
"""

from typing import Iterable

# canonical error_code -> (HTTP status, client message)
ERROR_RESPONSES: dict[str, tuple[int, str]] = {
    "invalid_input": (400, "invalid input"),
    "invalid_filter": (400, "invalid filter condition"),
    "not_found": (404, "id not found"),
    # Duplicate names are reported as a server error, not 409. Existing clients match on it.
    "duplicate": (500, "input book name is not unique"),
    "internal": (500, "internal server error"),
}

DEFAULT_ERROR_CODE = "internal"


def error_payload(error_code: str) -> dict[str, str]:
    """Response body for a canonical error code (unknown codes fall back to 'internal')."""
    _, client_message = ERROR_RESPONSES.get(error_code, ERROR_RESPONSES[DEFAULT_ERROR_CODE])
    return {"error": client_message}


def error_status(error_code: str) -> int:
    status_code, _ = ERROR_RESPONSES.get(error_code, ERROR_RESPONSES[DEFAULT_ERROR_CODE])
    return status_code


class RepositoryError(Exception):
    """
    Base exception for persistence errors.

    - message: detailed, log-oriented description
    - fields: optional list of field names related to the error (e.g. ['name'])
    - constraint: optional DB constraint name (for logs only)
    - error_code: canonical short code; defaults to 'internal'
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code or DEFAULT_ERROR_CODE

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        parts.append(f"code: {self.error_code}")
        return f"{self.message} ({'; '.join(parts)})"

    def to_payload(self) -> dict[str, str]:
        """
        JSON body for HTTP responses: `{"error": "<client message>"}`.

        Never includes `message`, `constraint` or driver text.
        """
        return error_payload(self.error_code)

    def http_status(self) -> int:
        return error_status(self.error_code)


class NotFoundError(RepositoryError):
    """No row matched the requested identifier."""

    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class DuplicateError(RepositoryError):
    """A unique constraint rejected the write."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFilterError(RepositoryError):
    """A list filter used an unsupported key or a value that does not parse."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_filter")


__all__ = [
    "ERROR_RESPONSES",
    "error_payload",
    "error_status",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFilterError",
]
