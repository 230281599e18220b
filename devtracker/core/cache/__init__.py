"""
Redis-backed cache and session state.

Modules:
- client: RedisClient lifecycle and JSON helpers
- refresh_tokens: Registry of issued refresh tokens
- oauth2_state: One-shot OAuth2 authorization state storage
"""

from .client import RedisClient
from .oauth2_state import OAuth2AuthorizationRequest, OAuth2AuthorizationStateStore
from .refresh_tokens import RefreshTokenStore

__all__ = [
    "OAuth2AuthorizationRequest",
    "OAuth2AuthorizationStateStore",
    "RedisClient",
    "RefreshTokenStore",
]
