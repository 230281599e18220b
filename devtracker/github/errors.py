"""Error types specific to the GitHub client layer.

Purpose:
- Provide typed exceptions thrown by ``GitHubApiClient``.
- Expose HTTP-oriented context (status code, response body, rate-limit reset)
  for diagnosis.

Usage:
- Catch ``GitHubApiError`` for general failures and inspect ``status_code`` or
  ``details``.
- Catch ``GitHubRateLimitError`` to back off until ``reset_at``.
- Catch ``GitHubOAuthError`` when the authorization code exchange is refused.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional


class GitHubApiError(Exception):
    """Base error for GitHub API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (e.g., response text).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class GitHubRateLimitError(GitHubApiError):
    """Raised when GitHub reports the rate limit as exhausted."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        limit: Optional[int] = None,
        reset_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.limit = limit
        self.reset_at = reset_at


class GitHubOAuthError(GitHubApiError):
    """Raised when the OAuth2 token endpoint rejects an authorization code."""

    def __init__(self, message: str, *, error: Optional[str] = None, details: Optional[Any] = None) -> None:
        super().__init__(message, status_code=None, details=details)
        self.error = error
