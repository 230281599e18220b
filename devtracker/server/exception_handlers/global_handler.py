"""
Global Exception Handler for FastAPI Application.

This module provides a global exception handler that catches all unhandled
exceptions and logs detailed information including error ID, request context,
and full traceback for debugging purposes.
"""

import traceback

from fastapi import Request
from fastapi.responses import JSONResponse

from devtracker.core.logging_config import get_logger
from devtracker.core.monitoring import log_error
from devtracker.server.schemas import ApiResponse

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns an ``ApiResponse`` failure whose
    message carries an error ID clients can quote when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with status 500 and error code INTERNAL_SERVER_ERROR
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    body = ApiResponse.failure(
        f"An internal server error occurred. (error id: {error_id})",
        "INTERNAL_SERVER_ERROR",
    )
    return JSONResponse(status_code=500, content=body.to_json())
