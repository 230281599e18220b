"""
Exception handlers for expected request failures.

Each handler answers with the ``ApiResponse`` envelope:

- request validation errors → 400 ``VALIDATION_ERROR``
- ``DevTrackerError`` subclasses → the status and error code declared on the class
- framework HTTP errors (unknown route, wrong method) → their own status
"""

from typing import Any, Sequence

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from devtracker.core.logging_config import get_logger
from devtracker.server.errors import (
    BadCredentialsError,
    DevTrackerError,
    UsernameNotFoundError,
)
from devtracker.server.schemas import ApiResponse

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."

_HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "ACCESS_DENIED",
    404: "RESOURCE_NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _field_name(loc: Sequence[Any]) -> str:
    # Drop the "body"/"query" prefix FastAPI adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def _error_message(error: dict) -> str:
    msg = error.get("msg", "")
    return msg.removeprefix("Value error, ")


def format_validation_errors(errors: Sequence[dict]) -> str:
    return ", ".join(f"{_field_name(e.get('loc', ()))}: {_error_message(e)}" for e in errors)


def error_response(status_code: int, message: str, error_code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ApiResponse.failure(message, error_code).to_json())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_errors(exc.errors())
    logger.warning(f"Validation error on {request.method} {request.url.path}: {message}")
    return error_response(400, f"Invalid input: {message}", "VALIDATION_ERROR")


async def devtracker_exception_handler(request: Request, exc: DevTrackerError) -> JSONResponse:
    if isinstance(exc, (BadCredentialsError, UsernameNotFoundError)):
        logger.warning(f"Authentication failed on {request.url.path}: {exc.message}")
        return error_response(exc.status_code, INVALID_CREDENTIALS_MESSAGE, exc.error_code)

    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.error_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    response = error_response(exc.status_code, str(exc.detail), code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response
