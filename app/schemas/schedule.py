"""
API schemas for schedule endpoints.

This module contains Pydantic models used for request/response serialization
in the schedule API endpoints. Validation rules live in app.models.schedule.
"""

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from typing import Any, List, Optional
from datetime import datetime


class ContentItemSchema(BaseModel):
    """Schema for a subject taught in an hour slot."""

    subject: str = Field(..., description="Subject name")
    prof: str = Field(default="", description="Professor name")


class HourSlotSchema(BaseModel):
    """Schema for one hour of a day."""

    hour: str = Field(..., description="Hour label")
    content: List[ContentItemSchema] = Field(..., description="Subjects in this hour")


class DaySchema(BaseModel):
    """Schema for a day of the schedule."""

    name: str = Field(..., description="Day name")
    subjects: List[HourSlotSchema] = Field(..., description="Hour slots of the day")


class ScheduleCreateRequest(BaseModel):
    """
    Schema for batch creation requests.

    ``schedules`` is accepted as-is and checked by the service so that an
    empty or malformed batch is reported as a 400 with a domain message.
    """

    schedules: Any = Field(
        None, description="Non-empty list of schedules to create"
    )


class ScheduleResponse(BaseModel):
    """Schema for schedule API responses."""

    document_id: str = Field(
        ..., alias="_id", description="Internal document id"
    )
    id: str = Field(..., description="Sequential schedule id")
    division: str
    level: str
    term: str
    year: str
    days: List[DaySchema]
    created_at: Optional[datetime] = Field(
        None, alias="createdAt", description="Creation timestamp"
    )
    updated_at: Optional[datetime] = Field(
        None, alias="updatedAt", description="Last update timestamp"
    )

    model_config = ConfigDict(populate_by_name=True)


class ScheduleCreateResponse(BaseModel):
    """Schema for batch creation responses."""

    message: str = Field(..., description="Outcome message")
    schedules: List[ScheduleResponse] = Field(
        ..., description="Created schedules in request order"
    )


class MessageResponse(BaseModel):
    """Schema for error and informational responses."""

    message: str = Field(..., description="Human readable message")
    error: Optional[str] = Field(None, description="Underlying error detail")
