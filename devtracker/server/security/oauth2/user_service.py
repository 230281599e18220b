"""
OAuth2 account linking.

Turns the profile returned by an identity provider into a DevTracker user:
the first login registers the account, later logins refresh nickname, avatar
and provider username. An email already registered through another provider
(including local sign-up) is refused.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from devtracker.core.database.entities.users import DeveloperType, User
from devtracker.core.database.repositories.users import UserRepository
from devtracker.core.logging_config import get_logger
from devtracker.core.monitoring import log_auth_event
from devtracker.server.errors import OAuth2AuthenticationProcessingError

from ..principal import UserPrincipal
from .user_info import OAuth2UserInfo, get_oauth2_user_info

logger = get_logger(__name__)


class OAuth2UserService:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def process_oauth2_user(self, registration_id: str, attributes: Dict[str, Any]) -> UserPrincipal:
        """Register or update the user behind an OAuth2 login.

        Args:
            registration_id: Provider key, e.g. ``"github"``.
            attributes: Raw profile attributes from the provider.

        Returns:
            Principal for the linked user, carrying the provider attributes.

        Raises:
            OAuth2AuthenticationProcessingError: Unsupported provider, missing
                email, email registered with a different provider, or a
                concurrent first login that registered the same email.
        """
        registration_id = registration_id.lower()
        user_info = get_oauth2_user_info(registration_id, attributes)

        if not user_info.email or not user_info.email.strip():
            raise OAuth2AuthenticationProcessingError("Email not found from OAuth2 provider")

        user = await self.users.find_by_email(user_info.email)
        if user is not None:
            if user.provider != registration_id:
                provider = user.provider or "local"
                raise OAuth2AuthenticationProcessingError(
                    f"Looks like you're signed up with {provider} account. "
                    f"Please use your {provider} account to login."
                )
            user = await self._update_existing_user(user, user_info)
        else:
            user = await self._register_new_user(registration_id, user_info)

        return UserPrincipal.create(user, attributes)

    async def _register_new_user(self, registration_id: str, user_info: OAuth2UserInfo) -> User:
        logger.info(f"Registering new user with email: {user_info.email}")
        user = User(
            email=user_info.email,
            nickname=user_info.name or user_info.email.split("@")[0],
            profile_image=user_info.image_url,
            provider=registration_id,
            provider_id=user_info.id,
            email_verified=True,
            developer_type=DeveloperType.OTHER,
            github_username=user_info.login,
        )
        try:
            saved = await self.users.create(user)
        except IntegrityError as e:
            await self.users.session.rollback()
            logger.warning(f"OAuth2 registration conflict for {user_info.email}: {e.orig}")
            raise OAuth2AuthenticationProcessingError("Account is already registered. Please try to login again.") from e
        log_auth_event("oauth2_register", user_id=saved.id, provider=registration_id)
        return saved

    async def _update_existing_user(self, user: User, user_info: OAuth2UserInfo) -> User:
        logger.info(f"Updating existing user: {user.email}")
        need_update = False

        if user_info.name and user.nickname != user_info.name:
            user.update_profile(user_info.name, user.profile_image)
            need_update = True

        if user_info.image_url is not None and user_info.image_url != user.profile_image:
            user.update_profile(user.nickname, user_info.image_url)
            need_update = True

        if user_info.login is not None and user_info.login != user.github_username:
            user.update_github_username(user_info.login)
            need_update = True

        return await self.users.update(user) if need_update else user
