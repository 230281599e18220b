"""Loads principals from the user table."""

from __future__ import annotations

from devtracker.core.database.repositories.users import UserRepository
from devtracker.server.errors import UsernameNotFoundError

from .principal import UserPrincipal


class UserDetailsService:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def load_user_by_username(self, email: str) -> UserPrincipal:
        user = await self.users.find_by_email(email)
        if user is None:
            raise UsernameNotFoundError(f"User not found with email: {email}")
        return UserPrincipal.create(user)

    async def load_user_by_id(self, user_id: int) -> UserPrincipal:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UsernameNotFoundError(f"User not found with id: {user_id}")
        return UserPrincipal.create(user)
