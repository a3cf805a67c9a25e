# bookstore/api/v1/error_handlers.py
"""
FastAPI exception handlers that map repository-level exceptions to HTTP responses.

- Repositories raise bookstore.exceptions.base.* exceptions (NotFoundError, DuplicateError, ...)
- These handlers produce stable JSON payloads (via .to_payload()) and HTTP codes (via .http_status()).
- Every handled error is logged once, here, before the response goes out.

Every error body has the shape `{"error": "<message>"}`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.exceptions.base import (
    RepositoryError,
    DuplicateError,
    InvalidFilterError,
    NotFoundError,
    error_payload,
    error_status,
)

logger = logging.getLogger(__name__)


# Most specific first. Mapping lives in the exception classes.

async def duplicate_error_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """500 with the uniqueness message."""
    logger.info("DuplicateError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def invalid_filter_handler(request: Request, exc: InvalidFilterError) -> JSONResponse:
    logger.info("InvalidFilterError for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Fallback for every other repository error -> 500 "internal server error".
    The detailed message goes to the log only.
    """
    logger.error("RepositoryError for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Undecodable JSON, payload constraint violations and non-integer path ids -> 400 "invalid input".
    """
    logger.info(
        "Invalid input for %s %s",
        request.method,
        request.url.path,
        extra={"errors": [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]},
    )
    return JSONResponse(status_code=error_status("invalid_input"), content=error_payload("invalid_input"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and methods keep their status but use the `{"error": ...}` body."""
    logger.info("HTTP %s for %s %s", exc.status_code, request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that escaped the handlers above -> 500 "internal server error"."""
    logger.error("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=error_status("internal"), content=error_payload("internal"))


# Call this from the app factory
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DuplicateError, duplicate_error_handler)
    app.add_exception_handler(InvalidFilterError, invalid_filter_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
