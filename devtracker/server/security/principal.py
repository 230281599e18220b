"""
Authenticated principal.

``UserPrincipal`` is what request handlers see as "the current user". It is
built from a ``User`` row at sign-in and OAuth2 login, or from the bare user
id carried by an access token on every other request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from devtracker.core.database.entities.users import User

ROLE_USER = "ROLE_USER"


@dataclass
class UserPrincipal:
    id: int
    email: str = ""
    password: Optional[str] = field(default=None, repr=False)
    nickname: str = ""
    authorities: Tuple[str, ...] = (ROLE_USER,)
    attributes: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def create(cls, user: User, attributes: Optional[Dict[str, Any]] = None) -> "UserPrincipal":
        return cls(
            id=user.id,
            email=user.email,
            password=user.password,
            nickname=user.nickname,
            attributes=dict(attributes or {}),
        )

    @classmethod
    def from_user_id(cls, user_id: int) -> "UserPrincipal":
        """Principal known only by id, as reconstructed from an access token."""
        return cls(id=user_id)

    @property
    def username(self) -> str:
        return self.email

    @property
    def name(self) -> str:
        return str(self.id)

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities
