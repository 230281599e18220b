"""GitHub integration: OAuth2 web flow and REST API client."""

from .client import GitHubApiClient
from .errors import GitHubApiError, GitHubOAuthError, GitHubRateLimitError
from .models import GitHubAccessToken, GitHubEmail, GitHubUser

__all__ = [
    "GitHubAccessToken",
    "GitHubApiClient",
    "GitHubApiError",
    "GitHubEmail",
    "GitHubOAuthError",
    "GitHubRateLimitError",
    "GitHubUser",
]
