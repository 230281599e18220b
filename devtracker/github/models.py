"""GitHub DTO models

Pydantic models for the subset of the GitHub OAuth2 and REST payloads this
service reads. Models ignore unknown fields; GitHub adds attributes freely.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GitHubModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GitHubAccessToken(GitHubModel):
    """Response of ``POST /login/oauth/access_token``."""

    access_token: str
    token_type: str = "bearer"
    scope: str = ""

    @property
    def scopes(self) -> List[str]:
        return [s for s in self.scope.replace(" ", ",").split(",") if s]


class GitHubUser(GitHubModel):
    """Response of ``GET /user``."""

    id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None

    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    def to_attributes(self) -> Dict[str, Any]:
        """OAuth2 user attributes as delivered by the provider, with a resolved email."""
        attributes = dict(self.raw)
        attributes.update(self.model_dump(exclude={"raw"}))
        return attributes


class GitHubEmail(GitHubModel):
    """Item of ``GET /user/emails``."""

    email: str
    primary: bool = False
    verified: bool = False
    visibility: Optional[str] = None
