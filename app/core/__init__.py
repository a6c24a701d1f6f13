"""
Core module initialization.

This module contains core application components like database connections,
configuration, logging, error types and middleware.
"""

from .postgres import init_db, close_postgres, get_postgres
from .logging import setup_logging
from .middleware import LoggingMiddleware
from .exceptions import (
    ScheduleError,
    ScheduleValidationError,
    ScheduleNotFoundError,
    StoreError,
)

__all__ = [
    "init_db",
    "close_postgres",
    "get_postgres",
    "setup_logging",
    "LoggingMiddleware",
    "ScheduleError",
    "ScheduleValidationError",
    "ScheduleNotFoundError",
    "StoreError",
]
