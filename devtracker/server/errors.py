"""
Domain exceptions for the DevTracker server.

Services raise these; ``exception_handlers`` maps each class to an HTTP
status and an ``ApiResponse`` error code.
"""

from __future__ import annotations

from typing import Any, Optional


class DevTrackerError(Exception):
    """Base error for request-level failures.

    Args:
        message: Human-readable error description returned to the client.
        details: Optional structured context, logged but never returned.
    """

    status_code: int = 400
    error_code: str = "BAD_REQUEST"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequestError(DevTrackerError):
    status_code = 400
    error_code = "BAD_REQUEST"


class ResourceNotFoundError(DevTrackerError):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    @classmethod
    def for_field(cls, resource_name: str, field_name: str, field_value: Any) -> "ResourceNotFoundError":
        return cls(f"{resource_name} not found with {field_name}: '{field_value}'")


class AuthenticationError(DevTrackerError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class BadCredentialsError(AuthenticationError):
    error_code = "AUTHENTICATION_FAILED"


class UsernameNotFoundError(AuthenticationError):
    error_code = "AUTHENTICATION_FAILED"


class OAuth2AuthenticationProcessingError(AuthenticationError):
    error_code = "OAUTH2_AUTHENTICATION_ERROR"


class AuthenticationRequiredError(AuthenticationError):
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication is required to access this resource.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AccessDeniedError(DevTrackerError):
    status_code = 403
    error_code = "ACCESS_DENIED"

    def __init__(self, message: str = "You do not have permission to access this resource.", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
