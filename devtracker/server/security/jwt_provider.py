"""
JWT token provider.

Creates, parses and validates the HMAC-signed tokens used by the API:

- Access tokens: ``sub`` (user id), ``iat``, ``exp``, ``email``, ``nickname``
  and ``type=access``.
- Refresh tokens: ``sub``, ``iat``, ``exp``, ``jti`` and ``type=refresh``. The
  ``jti`` keys the token in the refresh token registry.

The signing algorithm follows the key length: HS512 for keys of 64 bytes or
more, HS384 from 48 bytes, HS256 otherwise. Keys shorter than 32 bytes are
rejected.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from devtracker.core.logging_config import get_logger

from .principal import UserPrincipal

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
MIN_KEY_BYTES = 32


def select_algorithm(key: bytes) -> str:
    if len(key) < MIN_KEY_BYTES:
        raise ValueError(
            f"JWT secret is {len(key) * 8} bits; at least {MIN_KEY_BYTES * 8} bits are required for HMAC-SHA"
        )
    if len(key) >= 64:
        return "HS512"
    if len(key) >= 48:
        return "HS384"
    return "HS256"


class JwtTokenProvider:
    """Issues and verifies access and refresh tokens."""

    def __init__(self, secret: str, expiration_ms: int, refresh_expiration_ms: int) -> None:
        self._key = secret.encode("utf-8")
        self.algorithm = select_algorithm(self._key)
        self.expiration_ms = expiration_ms
        self.refresh_expiration_ms = refresh_expiration_ms

    @classmethod
    def from_config(cls, config: Any) -> "JwtTokenProvider":
        """Build a provider from a ``JwtConfig`` settings group."""
        return cls(config.secret.get_secret_value(), config.expiration_ms, config.refresh_expiration_ms)

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self.expiration_ms // 1000

    @property
    def refresh_token_expires_in(self) -> int:
        return self.refresh_expiration_ms // 1000

    def generate_access_token(self, principal: UserPrincipal) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(principal.id),
            "iat": now,
            "exp": now + timedelta(milliseconds=self.expiration_ms),
            "email": principal.email,
            "nickname": principal.nickname,
            "type": ACCESS_TOKEN_TYPE,
        }
        return jwt.encode(claims, self._key, algorithm=self.algorithm)

    def generate_refresh_token(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(milliseconds=self.refresh_expiration_ms),
            "jti": uuid.uuid4().hex,
            "type": REFRESH_TOKEN_TYPE,
        }
        return jwt.encode(claims, self._key, algorithm=self.algorithm)

    def get_claims(self, token: str) -> dict[str, Any]:
        """Decode and verify ``token``; raises ``jwt.InvalidTokenError`` subclasses on failure."""
        return jwt.decode(
            token,
            self._key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "iat", "exp"]},
        )

    def get_user_id_from_token(self, token: str) -> int:
        return int(self.get_claims(token)["sub"])

    def get_token_id(self, token: str) -> Optional[str]:
        return self.get_claims(token).get("jti")

    def validate_token(self, token: Optional[str], token_type: Optional[str] = None) -> bool:
        """Return True if ``token`` is well-formed, correctly signed, unexpired and of ``token_type``.

        Failures are logged with their reason and never raised.
        """
        if not token or not token.strip():
            logger.warning("JWT claims string is empty")
            return False
        try:
            claims = self.get_claims(token)
        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT token")
            return False
        except jwt.InvalidSignatureError:
            logger.warning("Invalid JWT signature")
            return False
        except jwt.DecodeError:
            logger.warning("Invalid JWT token")
            return False
        except jwt.InvalidTokenError as e:
            logger.warning(f"Unsupported JWT token: {e}")
            return False

        if token_type is not None and claims.get("type") != token_type:
            logger.warning(f"Unexpected JWT token type: expected {token_type}, got {claims.get('type')}")
            return False
        try:
            int(claims["sub"])
        except (TypeError, ValueError):
            logger.warning("JWT subject is not a user id")
            return False
        return True
