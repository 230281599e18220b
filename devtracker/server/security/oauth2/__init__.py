"""OAuth2 login: provider attribute adapters, account linking and redirect handlers."""

from .user_info import GitHubOAuth2UserInfo, OAuth2UserInfo, get_oauth2_user_info, is_supported_registration
from .user_service import OAuth2UserService

__all__ = [
    "GitHubOAuth2UserInfo",
    "OAuth2UserInfo",
    "OAuth2UserService",
    "get_oauth2_user_info",
    "is_supported_registration",
]
