"""
Exception handlers for the DevTracker server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devtracker.core.logging_config import get_logger
from devtracker.server.errors import DevTrackerError

from .domain_handlers import devtracker_exception_handler, http_exception_handler, validation_exception_handler
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DevTrackerError, devtracker_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["global_exception_handler", "setup_exception_handlers"]
