"""
User entity models.

This module contains the ``users`` table together with the developer and
subscription enums stored on it. A user is either a local account (email and
password hash) or an OAuth2 account linked to an identity provider such as
GitHub.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field

from ..base import TimestampedBase


class DeveloperType(str, Enum):
    """Primary discipline of a developer."""

    FRONTEND = "FRONTEND"
    BACKEND = "BACKEND"
    FULLSTACK = "FULLSTACK"
    MOBILE = "MOBILE"
    DESIGNER = "DESIGNER"
    DEVOPS = "DEVOPS"
    OTHER = "OTHER"

    @property
    def display_name(self) -> str:
        return _DEVELOPER_TYPE_DISPLAY_NAMES[self]


_DEVELOPER_TYPE_DISPLAY_NAMES = {
    DeveloperType.FRONTEND: "프론트엔드",
    DeveloperType.BACKEND: "백엔드",
    DeveloperType.FULLSTACK: "풀스택",
    DeveloperType.MOBILE: "모바일",
    DeveloperType.DESIGNER: "디자이너",
    DeveloperType.DEVOPS: "데브옵스",
    DeveloperType.OTHER: "기타",
}


class SubscriptionPlan(str, Enum):
    """Subscription tier with its project quota and feature flags."""

    FREE = "FREE"
    BASIC = "BASIC"
    PRO = "PRO"

    @property
    def display_name(self) -> str:
        return _SUBSCRIPTION_PLAN_LIMITS[self][0]

    @property
    def max_projects(self) -> int:
        return _SUBSCRIPTION_PLAN_LIMITS[self][1]

    @property
    def git_integration_enabled(self) -> bool:
        return _SUBSCRIPTION_PLAN_LIMITS[self][2]


UNLIMITED_PROJECTS = 2_147_483_647

_SUBSCRIPTION_PLAN_LIMITS = {
    SubscriptionPlan.FREE: ("무료", 3, False),
    SubscriptionPlan.BASIC: ("베이직", 10, True),
    SubscriptionPlan.PRO: ("프로", UNLIMITED_PROJECTS, True),
}


class UserBase(TimestampedBase):
    """Base fields for the user entity."""

    email: str = Field(max_length=255, unique=True, nullable=False, description="Login email address")
    password: Optional[str] = Field(default=None, max_length=255, description="Password hash; null for OAuth2 users")
    nickname: str = Field(max_length=100, nullable=False, description="Display name")
    profile_image: Optional[str] = Field(default=None, max_length=500, description="Avatar URL")

    timezone: str = Field(default="Asia/Seoul", max_length=50, description="IANA timezone name")
    hourly_rate: Decimal = Field(
        default=Decimal("0"), max_digits=10, decimal_places=2, description="Hourly rate used for billing reports"
    )
    preferred_currency: str = Field(default="KRW", max_length=3, description="ISO 4217 currency code")

    github_username: Optional[str] = Field(default=None, max_length=100, description="GitHub login")
    gitlab_username: Optional[str] = Field(default=None, max_length=100, description="GitLab login")

    provider: Optional[str] = Field(default=None, max_length=20, description="Identity provider: local, github")
    provider_id: Optional[str] = Field(default=None, max_length=255, description="Subject id at the provider")
    email_verified: bool = Field(default=False, description="Whether the email was verified")


class User(UserBase, table=True):
    """Entity for a DevTracker account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = (
        sa.Index("idx_user_email", "email"),
        sa.Index("idx_user_github", "github_username"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    developer_type: DeveloperType = Field(
        sa_column=sa.Column(sa.Enum(DeveloperType, native_enum=False, length=20), nullable=False),
        description="Primary discipline",
    )
    subscription_plan: SubscriptionPlan = Field(
        default=SubscriptionPlan.FREE,
        sa_column=sa.Column(
            sa.Enum(SubscriptionPlan, native_enum=False, length=10),
            nullable=False,
            default=SubscriptionPlan.FREE,
        ),
        description="Current subscription tier",
    )

    def update_profile(self, nickname: Optional[str], profile_image: Optional[str]) -> None:
        """Change the nickname when a non-blank one is given and the image when one is given."""
        if nickname is not None and nickname.strip():
            self.nickname = nickname
        if profile_image is not None:
            self.profile_image = profile_image

    def update_developer_info(
        self, developer_type: Optional[DeveloperType], hourly_rate: Optional[Decimal]
    ) -> None:
        if developer_type is not None:
            self.developer_type = developer_type
        if hourly_rate is not None:
            self.hourly_rate = hourly_rate

    def update_github_username(self, github_username: Optional[str]) -> None:
        self.github_username = github_username

    @property
    def is_oauth2_account(self) -> bool:
        return self.provider is not None and self.provider != "local"

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, provider={self.provider})"
