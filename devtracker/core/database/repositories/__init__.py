"""
Database repository layer using SQLModel.

Modules:
- base: AsyncBaseRepository interface and QueryBuilder utilities
- users: User repository operations
"""

from .base import AsyncBaseRepository, QueryBuilder
from .users import UserRepository

__all__ = ["AsyncBaseRepository", "QueryBuilder", "UserRepository"]
