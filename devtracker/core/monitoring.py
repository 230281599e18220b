"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of the DevTracker API, including:
- API endpoint tracing
- Database operation monitoring
- Outbound GitHub HTTP call tracing
- Error tracking and request metrics

Logfire is only configured when ``monitoring.logfire_enabled`` is set and a
token is present; otherwise every helper here is a quiet no-op apart from
local debug logging.
"""

import logging
from typing import Optional

import logfire
from fastapi import FastAPI
from logfire import SamplingOptions

from devtracker import __version__
from devtracker.server.core.config import MonitoringConfig, settings

logger = logging.getLogger(__name__)

_logfire_configured = False


def is_logfire_configured() -> bool:
    return _logfire_configured


def initialize_logfire(app: FastAPI | None = None, config: Optional[MonitoringConfig] = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - SQLAlchemy database operations
    - HTTPX HTTP requests
    - FastAPI endpoints

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).
        config: Monitoring configuration; defaults to ``settings.monitoring``.

    Returns:
        True when Logfire was configured, False when monitoring stays disabled.
    """
    global _logfire_configured

    config = config or settings.monitoring
    if not config.logfire_enabled:
        logger.info("Logfire monitoring is disabled. Set MONITORING__LOGFIRE_ENABLED=true to enable.")
        return False

    token = config.logfire_token.get_secret_value() if config.logfire_token else ""
    if not token:
        logger.warning(
            "Logfire is enabled but MONITORING__LOGFIRE_TOKEN is not set. "
            "Monitoring will not work until a token is provided."
        )
        return False

    try:
        logfire.configure(
            token=token,
            service_name=config.service_name,
            service_version=__version__,
            environment=config.environment,
            sampling=SamplingOptions(head=config.sample_rate),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    _logfire_configured = True

    try:
        logfire.instrument_sqlalchemy()
        logger.info("Logfire: SQLAlchemy instrumentation enabled")
    except Exception as e:
        logger.warning(f"Failed to instrument SQLAlchemy: {e}")

    try:
        logfire.instrument_httpx()
        logger.info("Logfire: HTTPX instrumentation enabled")
    except Exception as e:
        logger.warning(f"Failed to instrument HTTPX: {e}")

    if app is not None:
        try:
            logfire.instrument_fastapi(app=app)
            logger.info("Logfire: FastAPI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument FastAPI: {e}")
    else:
        logger.debug("FastAPI app instance not provided, skipping FastAPI instrumentation")

    logger.info(
        f"Logfire monitoring initialized: environment={config.environment}, service={config.service_name}"
    )
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    if not _logfire_configured:
        return
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    if not _logfire_configured:
        return
    try:
        logfire.error(
            f"{error_type}: {error_message}",
            **(context or {}),
        )
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")


def log_auth_event(event: str, user_id: Optional[int] = None, provider: Optional[str] = None) -> None:
    """
    Log an authentication event (sign-up, sign-in, refresh, OAuth2 login).

    Args:
        event: Event name
        user_id: Affected user id, when known
        provider: Identity provider ("local", "github", ...)
    """
    if not _logfire_configured:
        return
    try:
        logfire.info("Auth event: {event}", event=event, user_id=user_id, provider=provider)
    except Exception:
        logger.debug(f"Could not log auth event to Logfire: {event}")
