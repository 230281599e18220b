"""
Core utilities for DevTracker.

This package provides core functionality including logging configuration,
monitoring, database setup, and the Redis cache layer.
"""

from devtracker.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
