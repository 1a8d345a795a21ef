"""
Exception handlers turning repository exceptions into JSON error responses.

The status code and body come from the exception itself
(`http_status()` / `to_payload()`), so the handlers only log and wrap:

    {"detail": "Not found publication with id:7", "code": "not_found"}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from publication_assistant.exceptions.base import (
    DuplicateError,
    InvalidFieldError,
    NotFoundError,
    RepositoryError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def duplicate_error_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    logger.info("DuplicateError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def invalid_field_handler(request: Request, exc: InvalidFieldError) -> JSONResponse:
    logger.info("InvalidFieldError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Fallback for any other repository failure. The message is already
    user-safe; driver details stay in the logs.
    """
    logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(DuplicateError, duplicate_error_handler)
    app.add_exception_handler(InvalidFieldError, invalid_field_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
