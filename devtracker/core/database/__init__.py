"""
Centralized database layer for DevTracker.

Structure:
- entities/: Database entity models organized by table
- repositories/: Data access layer organized by table
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, table creation)
"""

from .base import Base, TimestampedBase, utc_now
from .session import (
    async_session_maker,
    check_database,
    dispose_engine,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    normalize_database_url,
)

__all__ = [
    "Base",
    "TimestampedBase",
    "async_session_maker",
    "check_database",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "dispose_engine",
    "engine",
    "get_session",
    "init_db",
    "normalize_database_url",
    "utc_now",
]
