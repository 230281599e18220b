"""
Request authentication dependencies.

Routes are public unless they depend on ``get_current_principal`` or
``require_role``. A missing, malformed, expired or non-access token leaves
the request anonymous; only routes that need a principal turn that into a
401.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from devtracker.core.logging_config import get_logger
from devtracker.server.errors import AccessDeniedError, AuthenticationRequiredError
from devtracker.server.services.deps import get_jwt_provider

from .jwt_provider import ACCESS_TOKEN_TYPE, JwtTokenProvider
from .principal import UserPrincipal

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="bearer-jwt",
    bearerFormat="JWT",
    description="JWT access token issued by /api/v1/auth/signin",
)


async def get_optional_principal(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    jwt_provider: Annotated[JwtTokenProvider, Depends(get_jwt_provider)],
) -> Optional[UserPrincipal]:
    """Principal for a valid bearer access token, else None."""
    if credentials is None or not credentials.credentials:
        return None
    token = credentials.credentials
    if not jwt_provider.validate_token(token, ACCESS_TOKEN_TYPE):
        logger.debug(f"Ignoring invalid bearer token on {request.method} {request.url.path}")
        return None
    principal = UserPrincipal.from_user_id(jwt_provider.get_user_id_from_token(token))
    request.state.principal = principal
    return principal


async def get_current_principal(
    principal: Annotated[Optional[UserPrincipal], Depends(get_optional_principal)],
) -> UserPrincipal:
    """Principal of the caller.

    Raises:
        AuthenticationRequiredError: No valid access token was presented.
    """
    if principal is None:
        raise AuthenticationRequiredError()
    return principal


def require_role(authority: str) -> Callable[..., UserPrincipal]:
    """Dependency factory that admits only principals holding ``authority``."""

    async def _require_role(
        principal: Annotated[UserPrincipal, Depends(get_current_principal)],
    ) -> UserPrincipal:
        if not principal.has_authority(authority):
            raise AccessDeniedError()
        return principal

    return _require_role


OptionalPrincipalDep = Annotated[Optional[UserPrincipal], Depends(get_optional_principal)]
CurrentPrincipalDep = Annotated[UserPrincipal, Depends(get_current_principal)]
