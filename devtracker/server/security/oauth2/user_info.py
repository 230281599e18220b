"""
OAuth2 user attribute adapters.

Each identity provider returns its own profile shape; ``OAuth2UserInfo``
exposes the handful of fields account linking needs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from devtracker.server.errors import OAuth2AuthenticationProcessingError


class OAuth2UserInfo(ABC):
    def __init__(self, attributes: Dict[str, Any]) -> None:
        self.attributes = attributes

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def email(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def image_url(self) -> Optional[str]: ...

    @property
    def login(self) -> Optional[str]:
        """Provider username, when the provider has one."""
        return None


class GitHubOAuth2UserInfo(OAuth2UserInfo):
    """Attributes of ``GET https://api.github.com/user``."""

    @property
    def id(self) -> str:
        return str(self.attributes.get("id"))

    @property
    def name(self) -> Optional[str]:
        name = self.attributes.get("name")
        return name if name is not None else self.attributes.get("login")

    @property
    def email(self) -> Optional[str]:
        return self.attributes.get("email")

    @property
    def image_url(self) -> Optional[str]:
        return self.attributes.get("avatar_url")

    @property
    def login(self) -> Optional[str]:
        return self.attributes.get("login")


_USER_INFO_TYPES: Dict[str, type[OAuth2UserInfo]] = {
    "github": GitHubOAuth2UserInfo,
}


def is_supported_registration(registration_id: str) -> bool:
    return registration_id.lower() in _USER_INFO_TYPES


def get_oauth2_user_info(registration_id: str, attributes: Dict[str, Any]) -> OAuth2UserInfo:
    """Adapter for ``registration_id`` (case-insensitive).

    Raises:
        OAuth2AuthenticationProcessingError: The provider is not supported.
    """
    info_type = _USER_INFO_TYPES.get(registration_id.lower())
    if info_type is None:
        raise OAuth2AuthenticationProcessingError(f"Sorry! Login with {registration_id} is not supported yet.")
    return info_type(attributes)
