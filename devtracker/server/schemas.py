"""
API Schemas.

This module contains Pydantic models used for API request bodies and response validation.
These schemas define the interface contract between the client and the server.

All payloads use camelCase on the wire (``confirmPassword``, ``accessToken``)
while Python code keeps snake_case attribute names.
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from devtracker.core.database import utc_now
from devtracker.core.database.entities.users import DeveloperType, SubscriptionPlan

T = TypeVar("T")

# Letters, digits and the symbols @$!%*#?& only; at least one of each class.
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]*$")

JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =====================================================================
# Envelope
# =====================================================================


class ApiResponse(CamelModel, Generic[T]):
    """
    Common response envelope.

    Null fields are omitted from the JSON body.
    """

    success: bool = Field(..., description="Whether the request succeeded", examples=[True])
    message: Optional[str] = Field(default=None, description="Human-readable message")
    data: Optional[T] = Field(default=None, description="Response payload")
    error_code: Optional[str] = Field(default=None, description="Machine-readable error code", examples=["VALIDATION_ERROR"])
    timestamp: datetime = Field(default_factory=utc_now, description="Server time of the response (UTC)")

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, error_code: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=False, message=message, error_code=error_code)

    def to_json(self) -> dict:
        """Body for a raw ``JSONResponse``, serialized the same way as route responses."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =====================================================================
# Requests
# =====================================================================


class SignUpRequest(CamelModel):
    """
    Schema for registering a local account.
    """

    email: EmailStr = Field(..., description="Email address", examples=["developer@example.com"])
    password: str = Field(
        ...,
        min_length=8,
        max_length=100,
        description="Password with at least one letter, one digit and one of @$!%*#?&",
        examples=["password123!"],
    )
    confirm_password: str = Field(..., min_length=1, description="Password confirmation", examples=["password123!"])
    nickname: str = Field(..., min_length=2, max_length=50, description="Display name", examples=["devkim"])
    developer_type: DeveloperType = Field(..., description="Primary discipline", examples=[DeveloperType.FULLSTACK])
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, description="Hourly rate", examples=[50000])
    preferred_currency: str = Field(default="KRW", max_length=3, description="ISO 4217 currency code")
    github_username: Optional[str] = Field(default=None, max_length=100, description="GitHub login")

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError("Password must contain letters, digits and special characters (@$!%*#?&).")
        return value

    @field_validator("nickname", "confirm_password")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def is_password_matching(self) -> bool:
        return self.password == self.confirm_password


class LoginRequest(CamelModel):
    """
    Schema for signing in with email and password.
    """

    email: EmailStr = Field(..., description="Email address", examples=["developer@example.com"])
    password: str = Field(..., min_length=1, description="Password", examples=["password123!"])


class RefreshTokenRequest(CamelModel):
    """
    Schema for exchanging a refresh token for a new token pair.
    """

    refresh_token: str = Field(..., min_length=1, description="Refresh token issued at sign-in")

    @field_validator("refresh_token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Refresh token is required.")
        return value


# =====================================================================
# Responses
# =====================================================================


class UserResponse(CamelModel):
    """
    Public view of a user account.
    """

    id: int
    email: str
    nickname: str
    profile_image: Optional[str] = None
    developer_type: DeveloperType
    subscription_plan: SubscriptionPlan
    timezone: str
    hourly_rate: Optional[JsonDecimal] = None
    preferred_currency: str
    github_username: Optional[str] = None
    gitlab_username: Optional[str] = None
    provider: Optional[str] = None
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AuthResponse(CamelModel):
    """
    Token pair issued on sign-in and refresh.
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds", examples=[86400])
    user: UserResponse
