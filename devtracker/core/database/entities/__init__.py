"""
Database entity models.

Modules:
- users: Accounts with their developer profile and identity-provider link
"""

from .users import DeveloperType, SubscriptionPlan, User

__all__ = ["DeveloperType", "SubscriptionPlan", "User"]
