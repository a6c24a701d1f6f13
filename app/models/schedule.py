"""
Business logic models for schedule documents.

These models hold the validation rules for the nested
days → hours → subjects structure, separate from API serialization concerns.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict
from pydantic_core.core_schema import ValidationInfo
from typing import Any, ClassVar, List, Optional, Tuple
from datetime import datetime
from uuid import UUID

# Context key switching ContentItem into strict (professor required) mode
REQUIRE_PROFESSOR = "require_professor"


class DocumentModel(BaseModel):
    """Base for schedule document parts: numbers coerce to strings, extras are dropped."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class ContentItem(DocumentModel):
    """A subject taught during an hour slot, with its optional professor."""

    subject: str = Field(..., min_length=1, description="Subject name")
    prof: str = Field(default="", description="Professor name")

    @model_validator(mode="before")
    @classmethod
    def check_professor(cls, data: Any, info: ValidationInfo) -> Any:
        """Require ``prof`` in strict mode; otherwise a missing or null prof becomes ''."""
        if not isinstance(data, dict) or data.get("prof") is not None:
            return data
        if info.context and info.context.get(REQUIRE_PROFESSOR):
            raise ValueError("prof is required")
        return {key: value for key, value in data.items() if key != "prof"}


class HourSlot(DocumentModel):
    """One hour of a day and what is taught in it."""

    hour: str = Field(..., min_length=1, description="Hour label, e.g. '08:00-09:00'")
    content: List[ContentItem] = Field(..., description="Subjects taught in this hour")


class Day(DocumentModel):
    """A named day with its ordered hour slots."""

    name: str = Field(..., min_length=1, description="Day name")
    subjects: List[HourSlot] = Field(..., description="Hour slots of the day")


class ScheduleDocument(DocumentModel):
    """
    A schedule as submitted by clients, before an id is assigned.

    All five fields are required; ``days`` may be empty.
    """

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "division",
        "level",
        "term",
        "year",
        "days",
    )

    division: str = Field(..., min_length=1)
    level: str = Field(..., min_length=1)
    term: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    days: List[Day] = Field(..., description="Ordered days of the schedule")


class ScheduleChanges(DocumentModel):
    """
    A partial schedule used by updates.

    Omitted fields are left untouched; provided fields follow the same rules
    as ScheduleDocument and may not be null.
    """

    division: Optional[str] = Field(None, min_length=1)
    level: Optional[str] = Field(None, min_length=1)
    term: Optional[str] = Field(None, min_length=1)
    year: Optional[str] = Field(None, min_length=1)
    days: Optional[List[Day]] = None

    @field_validator("division", "level", "term", "year", "days", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Explicit nulls would erase required fields."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    def to_update(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class Schedule(ScheduleDocument):
    """A stored schedule with its external and internal identifiers."""

    id: int = Field(..., ge=1, description="Sequential external id")
    uid: UUID = Field(..., description="Store-assigned identity")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def next_id(max_id: Optional[int]) -> int:
        """Id for the next insertion: max existing id + 1, or 1 on an empty store."""
        return max_id + 1 if max_id else 1
