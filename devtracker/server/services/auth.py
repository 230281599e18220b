"""
Authentication Service.

Implements local account registration, email/password sign-in, refresh
token rotation and current-user lookup. Token pairs are issued by
``JwtTokenProvider``; every refresh token issued is recorded in the
``RefreshTokenStore`` so that rotation and logout can revoke it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError

from devtracker.core.cache.refresh_tokens import RefreshTokenStore
from devtracker.core.database.entities.users import User
from devtracker.core.database.repositories.users import UserRepository
from devtracker.core.logging_config import get_logger
from devtracker.core.monitoring import log_auth_event
from devtracker.server.errors import (
    BadCredentialsError,
    BadRequestError,
    ResourceNotFoundError,
    UsernameNotFoundError,
)
from devtracker.server.schemas import AuthResponse, LoginRequest, RefreshTokenRequest, SignUpRequest, UserResponse
from devtracker.server.security.jwt_provider import REFRESH_TOKEN_TYPE, JwtTokenProvider
from devtracker.server.security.passwords import PasswordEncoder
from devtracker.server.security.principal import UserPrincipal
from devtracker.server.security.user_details import UserDetailsService

logger = get_logger(__name__)

LOCAL_PROVIDER = "local"


def to_user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


class AuthService:
    """Local authentication and token lifecycle."""

    def __init__(
        self,
        users: UserRepository,
        password_encoder: PasswordEncoder,
        jwt_provider: JwtTokenProvider,
        refresh_tokens: RefreshTokenStore,
    ) -> None:
        self.users = users
        self.password_encoder = password_encoder
        self.jwt_provider = jwt_provider
        self.refresh_tokens = refresh_tokens
        self.user_details = UserDetailsService(users)

    async def sign_up(self, request: SignUpRequest) -> UserResponse:
        """Register a local account.

        Checks run in order: hourly rate, GitHub username uniqueness, email
        uniqueness, then password confirmation.

        Raises:
            BadRequestError: If any check fails.
        """
        logger.info(f"Processing sign up for email: {request.email}")

        await self._validate_sign_up(request)

        if await self.users.exists_by_email(request.email):
            raise BadRequestError("Email is already in use.")

        if not request.is_password_matching:
            raise BadRequestError("Passwords do not match.")

        user = User(
            email=request.email,
            password=self.password_encoder.encode(request.password),
            nickname=request.nickname,
            developer_type=request.developer_type,
            hourly_rate=request.hourly_rate if request.hourly_rate is not None else Decimal("0"),
            preferred_currency=request.preferred_currency or "KRW",
            github_username=request.github_username,
            provider=LOCAL_PROVIDER,
            email_verified=False,
        )
        try:
            saved = await self.users.create(user)
        except IntegrityError as e:
            await self.users.session.rollback()
            logger.warning(f"Sign up conflict for {request.email}: {e.orig}")
            raise BadRequestError("Email is already in use.") from e

        logger.info(f"User successfully registered with ID: {saved.id}")
        log_auth_event("sign_up", user_id=saved.id, provider=LOCAL_PROVIDER)
        return to_user_response(saved)

    async def sign_in(self, request: LoginRequest) -> AuthResponse:
        """Authenticate with email and password and issue a token pair.

        Raises:
            BadCredentialsError: Unknown email, password-less (OAuth2) account or wrong password.
            ResourceNotFoundError: The account vanished between authentication and loading.
        """
        logger.info(f"Processing sign in for email: {request.email}")

        principal = await self._authenticate(request.email, request.password)

        user = await self.users.get_by_id(principal.id)
        if user is None:
            raise ResourceNotFoundError("User not found.")

        response = await self._issue_tokens(user)
        logger.info(f"User successfully signed in: {user.email}")
        log_auth_event("sign_in", user_id=user.id, provider=LOCAL_PROVIDER)
        return response

    async def refresh_token(self, request: RefreshTokenRequest) -> AuthResponse:
        """Exchange a refresh token for a new pair, revoking the presented one.

        Raises:
            BadRequestError: The token is invalid, not a refresh token, or already revoked.
            ResourceNotFoundError: The token's user no longer exists.
        """
        logger.info("Processing token refresh")

        token = request.refresh_token
        if not self.jwt_provider.validate_token(token, REFRESH_TOKEN_TYPE):
            raise BadRequestError("Invalid refresh token.")

        claims = self.jwt_provider.get_claims(token)
        user_id = int(claims["sub"])
        jti = claims.get("jti")
        # Deleting the entry is the redemption; only one caller can win it.
        if not jti or not await self.refresh_tokens.revoke(user_id, jti):
            logger.warning(f"Refresh token reuse or revoked token for user {user_id}")
            raise BadRequestError("Invalid refresh token.")

        user = await self.users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User not found.")

        response = await self._issue_tokens(user)
        logger.info(f"Tokens refreshed for user: {user.email}")
        log_auth_event("refresh", user_id=user.id)
        return response

    async def get_current_user(self, principal: UserPrincipal) -> UserResponse:
        user = await self.users.get_by_id(principal.id)
        if user is None:
            raise ResourceNotFoundError("User not found.")
        return to_user_response(user)

    async def logout(self, principal: Optional[UserPrincipal]) -> int:
        """Revoke every refresh token of the signed-in user; a no-op for anonymous callers."""
        if principal is None:
            return 0
        revoked = await self.refresh_tokens.revoke_all(principal.id)
        log_auth_event("logout", user_id=principal.id)
        return revoked

    async def issue_tokens_for(self, principal: UserPrincipal) -> tuple[str, str]:
        """Issue and record a token pair for an already authenticated principal."""
        access_token = self.jwt_provider.generate_access_token(principal)
        refresh_token = self.jwt_provider.generate_refresh_token(principal.id)
        await self.refresh_tokens.save(principal.id, self.jwt_provider.get_token_id(refresh_token))
        return access_token, refresh_token

    async def _issue_tokens(self, user: User) -> AuthResponse:
        access_token, refresh_token = await self.issue_tokens_for(UserPrincipal.create(user))
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=self.jwt_provider.access_token_expires_in,
            user=to_user_response(user),
        )

    async def _authenticate(self, email: str, password: str) -> UserPrincipal:
        try:
            principal = await self.user_details.load_user_by_username(email)
        except UsernameNotFoundError as e:
            logger.debug(e.message)
            raise BadCredentialsError("Bad credentials") from e
        if not self.password_encoder.matches(password, principal.password):
            raise BadCredentialsError("Bad credentials")
        return principal

    async def _validate_sign_up(self, request: SignUpRequest) -> None:
        if request.hourly_rate is not None and request.hourly_rate < 0:
            raise BadRequestError("Hourly rate must be zero or greater.")

        if request.github_username is not None and await self.users.exists_by_github_username(
            request.github_username
        ):
            raise BadRequestError("GitHub username is already in use.")
