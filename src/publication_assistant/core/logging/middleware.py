"""
Request id middleware.

Reuses an incoming `X-Request-ID` header when present, otherwise generates a
UUID4. The id is stored in the logging contextvar for the duration of the
request and echoed back in the `X-Request-ID` response header.
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def _accept_incoming(value: str | None) -> str | None:
    # Reject ids that could break a log line or bloat it
    if not value or len(value) > MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return None
    return value


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = _accept_incoming(request.headers.get(REQUEST_ID_HEADER)) or str(uuid.uuid4())
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)


__all__ = ["RequestIDMiddleware", "REQUEST_ID_HEADER"]
