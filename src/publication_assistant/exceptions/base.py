"""
App-level exceptions raised by the repository layer.

Controllers never see raw SQLAlchemy errors: repositories translate them into
one of the classes below, and the FastAPI handlers in
`publication_assistant.api.v1.error_handlers` turn them into JSON responses using
`to_payload()` and `http_status()`.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for repository errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g. ['email'])
    - constraint: optional DB constraint name (for logs only, never sent to clients)
    - error_code: canonical short code (e.g. 'duplicate', 'not_found') used by clients
    """

    # canonical error_code -> HTTP status; anything else falls back to 400
    ERROR_CODE_TO_STATUS = {
        "duplicate": 409,
        "invalid_field": 422,
        "not_found": 404,
        "invalid_input": 422,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.

        Shape:
            {
                "detail": "Not found employee with id:7",
                "code": "not_found",      # optional
                "fields": ["email"],      # optional
            }

        The constraint name is deliberately left out of the payload.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller passes unknown fields or an unrelated entity type to a repository."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError"
]
