"""
OAuth2 login outcome handlers.

After a successful provider login the browser is redirected to the
front-end with a freshly issued token pair in the query string; after a
failure it is redirected with an ``error`` parameter instead.
"""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit, urlunsplit

from fastapi.responses import RedirectResponse

from devtracker.core.logging_config import get_logger
from devtracker.server.services.auth import AuthService

from ..principal import UserPrincipal

logger = get_logger(__name__)


def append_query(url: str, **params: str) -> str:
    parts = urlsplit(url)
    query = "&".join(q for q in (parts.query, urlencode(params)) if q)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


class OAuth2LoginHandler:
    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service

    async def on_success(self, principal: UserPrincipal, redirect_uri: str) -> RedirectResponse:
        access_token, refresh_token = await self.auth_service.issue_tokens_for(principal)
        logger.info(f"OAuth2 login succeeded for user {principal.id}")
        target = append_query(redirect_uri, access_token=access_token, refresh_token=refresh_token)
        return RedirectResponse(target, status_code=302)

    async def on_failure(self, message: str, redirect_uri: str) -> RedirectResponse:
        logger.warning(f"OAuth2 login failed: {message}")
        return RedirectResponse(append_query(redirect_uri, error=message), status_code=302)
