"""
User repository implementation.

This module provides data access operations for accounts: CRUD plus the
lookups used by local sign-in, OAuth2 account linking and reporting.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.users import DeveloperType, User
from .base import AsyncBaseRepository, QueryBuilder


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def create(self, user: User) -> User:
        """Insert a new user and return it with its generated id and timestamps."""
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def save(self, user: User) -> User:
        """Insert or update depending on whether the user already has an id."""
        if user.id is None:
            return await self.create(user)
        return await self.update(user)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, user: User) -> User:
        user.updated_at = utc_now()
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: int) -> bool:
        user = await self.get_by_id(user_id)
        if user:
            await self.session.delete(user)
            await self.session.commit()
            return True
        return False

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[User]:
        """List users ordered by id.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Equality filters on user columns (e.g. provider, developer_type)

        Returns:
            List of User instances
        """
        stmt = select(User).order_by(User.id)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, User, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # -----------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find_by_github_username(self, github_username: str) -> Optional[User]:
        stmt = select(User).where(User.github_username == github_username).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def exists_by_github_username(self, github_username: str) -> bool:
        stmt = select(User.id).where(User.github_username == github_username).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find_by_provider_and_provider_id(self, provider: str, provider_id: str) -> Optional[User]:
        stmt = select(User).where(User.provider == provider, User.provider_id == provider_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by_email_and_verified(self, email: str) -> Optional[User]:
        """Find a user by email, only if the address has been verified."""
        stmt = select(User).where(User.email == email, User.email_verified.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_developer_type(self, developer_type: DeveloperType) -> int:
        stmt = select(func.count()).select_from(User).where(User.developer_type == developer_type)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
