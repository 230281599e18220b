"""
Authentication API Endpoints.

This module exposes local account registration, email/password sign-in,
token refresh, the GitHub login entry point, current-user lookup and logout.

Service-level failures on signup, signin, refresh and me are answered with
HTTP 400 and an ``ApiResponse`` whose message reads
``"<Action> failed: <reason>"``. Request validation errors still go through
the global ``VALIDATION_ERROR`` handler.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from devtracker.core.logging_config import get_logger
from devtracker.server.errors import DevTrackerError
from devtracker.server.schemas import (
    ApiResponse,
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    SignUpRequest,
    UserResponse,
)
from devtracker.server.security.deps import CurrentPrincipalDep, OptionalPrincipalDep
from devtracker.server.services.deps import AuthServiceDep

logger = get_logger(__name__)

router = APIRouter()

GITHUB_AUTHORIZATION_PATH = "/oauth2/authorization/github"

_FAILURE_RESPONSE = {400: {"model": ApiResponse[None], "description": "The operation was rejected."}}


def _failed(action: str, exc: DevTrackerError) -> JSONResponse:
    return JSONResponse(status_code=400, content=ApiResponse.failure(f"{action} failed: {exc.message}").to_json())


@router.post(
    "/signup",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Sign Up",
    description="Register a new account with email and password.",
    responses=_FAILURE_RESPONSE,
)
async def sign_up(request: SignUpRequest, auth_service: AuthServiceDep):
    """
    Register a local account.

    The password must be confirmed; the email and the optional GitHub
    username must not belong to another account.
    """
    logger.info(f"Sign up request for email: {request.email}")
    try:
        user = await auth_service.sign_up(request)
    except DevTrackerError as e:
        logger.warning(f"Sign up failed for email {request.email}: {e.message}")
        return _failed("Sign up", e)
    return ApiResponse.ok(user, "Sign up completed.")


@router.post(
    "/signin",
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
    summary="Sign In",
    description="Sign in with email and password and receive an access/refresh token pair.",
    responses=_FAILURE_RESPONSE,
)
async def sign_in(request: LoginRequest, auth_service: AuthServiceDep):
    logger.info(f"Sign in request for email: {request.email}")
    try:
        tokens = await auth_service.sign_in(request)
    except DevTrackerError as e:
        logger.warning(f"Sign in failed for email {request.email}: {e.message}")
        return _failed("Sign in", e)
    return ApiResponse.ok(tokens, "Signed in successfully.")


@router.post(
    "/refresh",
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
    summary="Refresh Tokens",
    description="Exchange a refresh token for a new access/refresh token pair. The presented refresh token is revoked.",
    responses=_FAILURE_RESPONSE,
)
async def refresh(request: RefreshTokenRequest, auth_service: AuthServiceDep):
    try:
        tokens = await auth_service.refresh_token(request)
    except DevTrackerError as e:
        logger.warning(f"Token refresh failed: {e.message}")
        return _failed("Token refresh", e)
    return ApiResponse.ok(tokens, "Tokens refreshed.")


@router.get(
    "/oauth2/github",
    response_model=ApiResponse[str],
    response_model_exclude_none=True,
    summary="GitHub Login",
    description="Return the path that starts the GitHub OAuth2 login.",
)
async def github_login():
    return ApiResponse.ok(GITHUB_AUTHORIZATION_PATH, "Starting GitHub login.")


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
    summary="Current User",
    description="Return the account of the authenticated caller.",
    responses={401: {"model": ApiResponse[None], "description": "No valid access token."}, **_FAILURE_RESPONSE},
)
async def get_current_user(principal: CurrentPrincipalDep, auth_service: AuthServiceDep):
    try:
        user = await auth_service.get_current_user(principal)
    except DevTrackerError as e:
        logger.warning(f"Get current user failed for {principal.id}: {e.message}")
        return _failed("Get current user", e)
    return ApiResponse.ok(user, "Fetched current user.")


@router.post(
    "/logout",
    response_model=ApiResponse[str],
    response_model_exclude_none=True,
    summary="Logout",
    description="Revoke the caller's refresh tokens. Clients discard their access token.",
)
async def logout(principal: OptionalPrincipalDep, auth_service: AuthServiceDep):
    await auth_service.logout(principal)
    return ApiResponse.ok("SUCCESS", "Logged out.")
