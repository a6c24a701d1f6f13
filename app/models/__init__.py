"""
Models module initialization.

This module exports business logic models for the application.
"""

from .schedule import (
    REQUIRE_PROFESSOR,
    ContentItem,
    HourSlot,
    Day,
    ScheduleDocument,
    ScheduleChanges,
    Schedule,
)

__all__ = [
    "REQUIRE_PROFESSOR",
    "ContentItem",
    "HourSlot",
    "Day",
    "ScheduleDocument",
    "ScheduleChanges",
    "Schedule",
]
