"""
OAuth2 Login Endpoints.

Browser-facing endpoints of the OAuth2 authorization code flow:

1. ``GET /oauth2/authorization/{registration_id}`` stores a one-shot
   ``state`` and redirects to the provider's consent screen.
2. The provider redirects back to ``GET /oauth2/callback/{registration_id}``
   with ``code`` and ``state``. The state is consumed, the code is exchanged
   for a provider token, the profile is loaded and linked to a DevTracker
   account, and the browser is redirected to the front-end with a token pair
   (or with an ``error`` parameter on failure).
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse

from devtracker.core.cache import OAuth2AuthorizationRequest
from devtracker.core.logging_config import get_logger
from devtracker.github import GitHubApiClient, GitHubApiError
from devtracker.server.core.config import settings
from devtracker.server.errors import BadRequestError, DevTrackerError
from devtracker.server.security.oauth2 import is_supported_registration
from devtracker.server.services.deps import (
    GitHubClientDep,
    OAuth2LoginHandlerDep,
    OAuth2StateStoreDep,
    OAuth2UserServiceDep,
)

logger = get_logger(__name__)

router = APIRouter()

AUTHORIZATION_REQUEST_NOT_FOUND = "authorization_request_not_found"


def _resolve_redirect_uri(redirect_uri: Optional[str]) -> str:
    if not redirect_uri:
        return settings.oauth2.default_redirect_uri
    if redirect_uri not in settings.oauth2.authorized_redirect_uris:
        raise BadRequestError("Unauthorized redirect URI.")
    return redirect_uri


async def _load_github_attributes(github: GitHubApiClient, code: str, callback_url: str) -> dict:
    token = await github.exchange_code_for_token(code=code, redirect_uri=callback_url)
    user = await github.get_authenticated_user(token.access_token)
    attributes = user.to_attributes()
    if not attributes.get("email"):
        # Private profile email; read the account's address list instead
        attributes["email"] = await github.get_primary_email(token.access_token)
    return attributes


@router.get(
    "/authorization/{registration_id}",
    summary="Start OAuth2 Login",
    description="Redirect the browser to the identity provider's authorization page.",
    response_class=RedirectResponse,
    status_code=302,
    responses={400: {"description": "Unsupported provider or unauthorized redirect URI."}},
)
async def authorize(
    registration_id: str,
    state_store: OAuth2StateStoreDep,
    github: GitHubClientDep,
    redirect_uri: Optional[str] = Query(default=None, description="Front-end URI to receive the tokens"),
):
    if not is_supported_registration(registration_id):
        raise BadRequestError(f"Sorry! Login with {registration_id} is not supported yet.")
    target = _resolve_redirect_uri(redirect_uri)

    registration_id = registration_id.lower()
    state = await state_store.save(OAuth2AuthorizationRequest(registration_id=registration_id, redirect_uri=target))
    url = github.build_authorization_url(
        state=state, redirect_uri=settings.oauth2.github.callback_url(registration_id)
    )
    logger.info(f"Redirecting to {registration_id} authorization endpoint")
    return RedirectResponse(url, status_code=302)


@router.get(
    "/callback/{registration_id}",
    summary="OAuth2 Callback",
    description="Complete the OAuth2 login and redirect to the front-end with tokens or an error.",
    response_class=RedirectResponse,
    status_code=302,
)
async def callback(
    registration_id: str,
    state_store: OAuth2StateStoreDep,
    github: GitHubClientDep,
    user_service: OAuth2UserServiceDep,
    login_handler: OAuth2LoginHandlerDep,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    error_description: Optional[str] = Query(default=None),
):
    pending = await state_store.consume(state or "")
    if pending is None or pending.registration_id != registration_id.lower():
        logger.warning(f"OAuth2 callback for {registration_id} without a matching authorization request")
        return await login_handler.on_failure(AUTHORIZATION_REQUEST_NOT_FOUND, settings.oauth2.default_redirect_uri)

    if error:
        return await login_handler.on_failure(error_description or error, pending.redirect_uri)
    if not code:
        return await login_handler.on_failure("authorization code is missing", pending.redirect_uri)

    try:
        attributes = await _load_github_attributes(
            github, code, settings.oauth2.github.callback_url(pending.registration_id)
        )
        principal = await user_service.process_oauth2_user(pending.registration_id, attributes)
    except (GitHubApiError, DevTrackerError) as e:
        logger.error(f"Error processing OAuth2 user: {e}")
        return await login_handler.on_failure(str(e), pending.redirect_uri)
    except Exception as e:
        logger.error(f"Unexpected error during OAuth2 login for {registration_id}: {e}", exc_info=True)
        return await login_handler.on_failure("OAuth2 login failed", pending.redirect_uri)

    return await login_handler.on_success(principal, pending.redirect_uri)
