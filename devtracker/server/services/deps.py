"""
Service Dependencies.

Provides the singletons (JWT provider, password encoder, Redis client,
GitHub client) and the per-request services for API endpoints. Tests
replace any of these through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devtracker.core.cache import OAuth2AuthorizationStateStore, RedisClient, RefreshTokenStore
from devtracker.core.database import get_session
from devtracker.core.database.repositories.users import UserRepository
from devtracker.github import GitHubApiClient
from devtracker.server.core.config import settings
from devtracker.server.security.jwt_provider import JwtTokenProvider
from devtracker.server.security.oauth2.handlers import OAuth2LoginHandler
from devtracker.server.security.oauth2.user_service import OAuth2UserService
from devtracker.server.security.passwords import PasswordEncoder
from devtracker.server.services.auth import AuthService


@lru_cache
def get_jwt_provider() -> JwtTokenProvider:
    return JwtTokenProvider.from_config(settings.jwt)


@lru_cache
def get_password_encoder() -> PasswordEncoder:
    return PasswordEncoder()


@lru_cache
def get_redis_client() -> RedisClient:
    return RedisClient(
        settings.redis.url,
        key_prefix=settings.redis.key_prefix,
        socket_timeout=settings.redis.socket_timeout,
    )


@lru_cache
def get_github_client() -> GitHubApiClient:
    return GitHubApiClient.from_config(settings.oauth2.github)


def get_refresh_token_store(
    redis: Annotated[RedisClient, Depends(get_redis_client)],
    jwt_provider: Annotated[JwtTokenProvider, Depends(get_jwt_provider)],
) -> RefreshTokenStore:
    return RefreshTokenStore(redis, ttl_seconds=jwt_provider.refresh_token_expires_in)


def get_oauth2_state_store(
    redis: Annotated[RedisClient, Depends(get_redis_client)],
) -> OAuth2AuthorizationStateStore:
    return OAuth2AuthorizationStateStore(redis, ttl_seconds=settings.oauth2.state_ttl_seconds)


def get_user_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> UserRepository:
    return UserRepository(session)


def get_auth_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    password_encoder: Annotated[PasswordEncoder, Depends(get_password_encoder)],
    jwt_provider: Annotated[JwtTokenProvider, Depends(get_jwt_provider)],
    refresh_tokens: Annotated[RefreshTokenStore, Depends(get_refresh_token_store)],
) -> AuthService:
    return AuthService(users, password_encoder, jwt_provider, refresh_tokens)


def get_oauth2_user_service(users: Annotated[UserRepository, Depends(get_user_repository)]) -> OAuth2UserService:
    return OAuth2UserService(users)


def get_oauth2_login_handler(auth_service: Annotated[AuthService, Depends(get_auth_service)]) -> OAuth2LoginHandler:
    return OAuth2LoginHandler(auth_service)


JwtProviderDep = Annotated[JwtTokenProvider, Depends(get_jwt_provider)]
RedisClientDep = Annotated[RedisClient, Depends(get_redis_client)]
GitHubClientDep = Annotated[GitHubApiClient, Depends(get_github_client)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
OAuth2UserServiceDep = Annotated[OAuth2UserService, Depends(get_oauth2_user_service)]
OAuth2StateStoreDep = Annotated[OAuth2AuthorizationStateStore, Depends(get_oauth2_state_store)]
OAuth2LoginHandlerDep = Annotated[OAuth2LoginHandler, Depends(get_oauth2_login_handler)]
