"""GitHub HTTP client

Overview
--------
Thin async client for the two GitHub surfaces DevTracker talks to:

- the OAuth2 web flow endpoints (``/login/oauth/authorize`` and
  ``/login/oauth/access_token``) used by the GitHub login, and
- the REST API (``/user``, ``/user/emails``) used to read the profile of the
  user who just authorized the app.

Errors
------
- A 403 or 429 response reporting an exhausted rate limit raises
  ``GitHubRateLimitError`` carrying the limit and reset time.
- Any other non-2xx response or transport failure raises ``GitHubApiError``.
- A body that is not JSON, or does not match the expected shape, also raises
  ``GitHubApiError``.
- The token endpoint answers refusals with HTTP 200 and an ``error`` field;
  those raise ``GitHubOAuthError``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import GitHubApiError, GitHubOAuthError, GitHubRateLimitError
from .models import GitHubAccessToken, GitHubEmail, GitHubUser

GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "DevTracker"

ModelT = TypeVar("ModelT", bound=BaseModel)


class GitHubApiClient:
    """Async HTTP client for GitHub OAuth2 and REST endpoints."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        scope: Sequence[str] = ("read:user", "user:email"),
        api_base_url: str = "https://api.github.com",
        authorization_uri: str = "https://github.com/login/oauth/authorize",
        token_uri: str = "https://github.com/login/oauth/access_token",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a GitHub client.

        Args:
            client_id: OAuth App client id.
            client_secret: OAuth App client secret.
            scope: Scopes requested on the authorization URL.
            api_base_url: REST API base URL (``https://api.github.com`` or a GHES URL).
            authorization_uri: OAuth2 authorization endpoint.
            token_uri: OAuth2 token endpoint.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.client_id = client_id
        self._client_secret = client_secret
        self.scope = list(scope)
        self.api_base_url = api_base_url.rstrip("/")
        self.authorization_uri = authorization_uri
        self.token_uri = token_uri
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: Any, client: Optional[httpx.AsyncClient] = None) -> "GitHubApiClient":
        """Build a client from a ``GitHubOAuth2Config`` settings group."""
        return cls(
            client_id=config.client_id,
            client_secret=config.client_secret.get_secret_value(),
            scope=config.scope,
            api_base_url=config.api_base_url,
            authorization_uri=config.authorization_uri,
            token_uri=config.token_uri,
            timeout=config.timeout,
            client=client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # OAuth2 web flow
    # ------------------------------------------------------------------

    def build_authorization_url(self, *, state: str, redirect_uri: str) -> str:
        """Return the URL the browser is sent to for the GitHub consent screen."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": " ".join(self.scope),
            "state": state,
            "allow_signup": "true",
        }
        return str(httpx.URL(self.authorization_uri, params=params))

    async def exchange_code_for_token(self, *, code: str, redirect_uri: str) -> GitHubAccessToken:
        """Exchange an authorization code for an access token.

        POST ``/login/oauth/access_token``
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self._client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
        }
        r = await self._send("POST", self.token_uri, data=data, headers={"Accept": "application/json"})
        payload = self._json(r)
        if not isinstance(payload, dict):
            raise GitHubApiError("Unexpected GitHub token response", status_code=r.status_code, details=r.text)
        if "error" in payload:
            self._logger.warning("GitHub token exchange refused: %s", payload.get("error"))
            raise GitHubOAuthError(
                payload.get("error_description") or payload["error"],
                error=payload["error"],
                details=payload,
            )
        return self._validate(GitHubAccessToken, payload, r)

    # ------------------------------------------------------------------
    # REST API
    # ------------------------------------------------------------------

    async def get_authenticated_user(self, access_token: str) -> GitHubUser:
        """GET ``/user``"""
        r = await self._send("GET", f"{self.api_base_url}/user", headers=self._headers(access_token))
        payload = self._json(r)
        user = self._validate(GitHubUser, payload, r)
        user.raw = payload
        return user

    async def list_user_emails(self, access_token: str) -> List[GitHubEmail]:
        """GET ``/user/emails`` (requires the ``user:email`` scope)."""
        r = await self._send("GET", f"{self.api_base_url}/user/emails", headers=self._headers(access_token))
        payload = self._json(r)
        if not isinstance(payload, list):
            raise GitHubApiError("Unexpected GitHub emails response", status_code=r.status_code, details=r.text)
        return [self._validate(GitHubEmail, item, r) for item in payload]

    async def get_primary_email(self, access_token: str) -> Optional[str]:
        """Return the primary verified address, else any verified one, else None."""
        emails = await self.list_user_emails(access_token)
        verified = [e for e in emails if e.verified]
        for e in verified:
            if e.primary:
                return e.email
        return verified[0].email if verified else None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            r = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            self._logger.error("GitHub request failed: %s %s: %s", method, url, e)
            raise GitHubApiError(f"GitHub request failed: {e}") from e
        self._raise_for_rate_limit(r)
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.warning("GitHub %s %s returned %s", method, url, r.status_code)
            raise GitHubApiError(
                f"GitHub API error: {method} {url}",
                status_code=r.status_code,
                details=r.text,
            ) from e
        return r

    def _json(self, r: httpx.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            self._logger.warning("GitHub %s %s returned a non-JSON body", r.request.method, r.request.url)
            raise GitHubApiError(
                "GitHub returned an invalid response body", status_code=r.status_code, details=r.text
            ) from e

    def _validate(self, model: type[ModelT], payload: Any, r: httpx.Response) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            self._logger.warning("Unexpected %s payload from GitHub: %s", model.__name__, e)
            raise GitHubApiError(
                f"Unexpected GitHub response for {model.__name__}", status_code=r.status_code, details=payload
            ) from e

    def _raise_for_rate_limit(self, r: httpx.Response) -> None:
        if r.status_code not in (403, 429):
            return
        remaining = r.headers.get("X-RateLimit-Remaining")
        if r.status_code == 403 and remaining != "0" and "Retry-After" not in r.headers:
            return
        limit = r.headers.get("X-RateLimit-Limit")
        reset = r.headers.get("X-RateLimit-Reset")
        reset_at = datetime.fromtimestamp(int(reset), tz=timezone.utc) if reset and reset.isdigit() else None
        self._logger.warning("GitHub rate limit exhausted (limit=%s, reset_at=%s)", limit, reset_at)
        raise GitHubRateLimitError(
            "GitHub API rate limit exceeded",
            status_code=r.status_code,
            details=r.text,
            limit=int(limit) if limit and limit.isdigit() else None,
            reset_at=reset_at,
        )
