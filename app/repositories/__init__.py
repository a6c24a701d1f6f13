"""
Repositories module initialization.

This module exports data access layer components.
"""

from .crud import schedule_crud, ScheduleCRUD, resolve_key

__all__ = [
    "schedule_crud",
    "ScheduleCRUD",
    "resolve_key",
]
