"""
Schemas module initialization.

This module exports API schemas for request/response serialization.
"""

from .schedule import (
    ContentItemSchema,
    HourSlotSchema,
    DaySchema,
    ScheduleCreateRequest,
    ScheduleResponse,
    ScheduleCreateResponse,
    MessageResponse,
)

__all__ = [
    "ContentItemSchema",
    "HourSlotSchema",
    "DaySchema",
    "ScheduleCreateRequest",
    "ScheduleResponse",
    "ScheduleCreateResponse",
    "MessageResponse",
]
