"""
Service layer for schedule business logic.

Validates incoming schedule payloads, assigns sequential ids and maps CRUD
intents onto the repository. Raises ScheduleValidationError for bad input,
ScheduleNotFoundError when no record matches and StoreError when the store
fails. The router maps these to HTTP status codes.
"""

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

import asyncpg
from loguru import logger
from pydantic import ValidationError

from ..core.config import settings
from ..core.exceptions import (
    ScheduleNotFoundError,
    ScheduleValidationError,
    StoreError,
)
from ..models.schedule import (
    REQUIRE_PROFESSOR,
    Schedule,
    ScheduleChanges,
    ScheduleDocument,
)
from ..repositories.crud import schedule_crud
from ..schemas.schedule import DaySchema, ScheduleResponse

MISSING_FIELDS_MESSAGE = (
    "All fields (division, level, term, year, days) are required for each schedule"
)
EMPTY_BATCH_MESSAGE = (
    "Schedules array is required and should contain at least one schedule"
)


@contextmanager
def _store_errors(status_code: int) -> Iterator[None]:
    """Wrap driver and pool failures into StoreError with the given status."""
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError, ConnectionError, OSError) as e:
        logger.error(f"Schedule store operation failed: {e}")
        raise StoreError("Store operation failed", error=str(e), status_code=status_code) from e


def _format_errors(exc: ValidationError) -> str:
    """Render pydantic errors as 'days.0.subjects.1.hour: Field required; ...'."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "body"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def _validation_context() -> Dict[str, Any]:
    return {REQUIRE_PROFESSOR: settings.REQUIRE_PROFESSOR}


def _record_to_schedule(db_record: Any) -> Schedule:
    """Convert a DB record into a Schedule model instance."""
    data = dict(db_record)
    if isinstance(data.get("days"), str):
        data["days"] = json.loads(data["days"])
    return Schedule.model_validate(data)


def _build_schedule_response(db_record: Any) -> ScheduleResponse:
    """Build a ScheduleResponse from a database record."""
    schedule = _record_to_schedule(db_record)
    return ScheduleResponse(
        document_id=str(schedule.uid),
        id=str(schedule.id),
        division=schedule.division,
        level=schedule.level,
        term=schedule.term,
        year=schedule.year,
        days=[DaySchema.model_validate(day.model_dump()) for day in schedule.days],
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
    )


def validate_candidate(candidate: Any, index: int) -> ScheduleDocument:
    """
    Validate one schedule of a creation batch.

    Raises:
        ScheduleValidationError: If a required field is missing or the nested
            days structure is malformed.
    """
    if not isinstance(candidate, dict):
        raise ScheduleValidationError(
            MISSING_FIELDS_MESSAGE, error=f"schedules.{index}: must be an object"
        )

    missing = [
        field
        for field in ScheduleDocument.REQUIRED_FIELDS
        if candidate.get(field) is None or candidate.get(field) == ""
    ]
    if missing:
        raise ScheduleValidationError(
            MISSING_FIELDS_MESSAGE,
            error=f"schedules.{index}: missing {', '.join(missing)}",
        )

    try:
        return ScheduleDocument.model_validate(candidate, context=_validation_context())
    except ValidationError as e:
        raise ScheduleValidationError(
            f"Invalid schedule at index {index}",
            error=_format_errors(e),
        ) from e


def validate_changes(patch: Any) -> Dict[str, Any]:
    """
    Validate a partial update body and return the fields to write.

    ``id`` and ``_id`` are not updatable and are ignored.
    """
    if not isinstance(patch, dict):
        raise ScheduleValidationError(
            "Failed to update schedule", error="Request body must be a JSON object"
        )

    try:
        changes = ScheduleChanges.model_validate(patch, context=_validation_context())
    except ValidationError as e:
        raise ScheduleValidationError(
            "Failed to update schedule", error=_format_errors(e)
        ) from e
    return changes.to_update()


class ScheduleService:
    """Service layer encapsulating schedule business logic."""

    @staticmethod
    async def list_schedules(pool: asyncpg.Pool) -> List[ScheduleResponse]:
        with _store_errors(500):
            db_records = await schedule_crud.get_all(pool)
        return [_build_schedule_response(r) for r in db_records]

    @staticmethod
    async def get_schedule(pool: asyncpg.Pool, key: str) -> ScheduleResponse:
        with _store_errors(500):
            db_record = await schedule_crud.get_by_key(pool, key)
        if db_record is None:
            raise ScheduleNotFoundError()
        return _build_schedule_response(db_record)

    @staticmethod
    async def create_schedules(
        pool: asyncpg.Pool, payloads: Any
    ) -> List[ScheduleResponse]:
        """
        Create every schedule of a batch, in order.

        Each candidate is validated just before it is written, so a failure
        part-way through leaves the earlier schedules of the batch persisted.
        The next id is read then written without a lock; the unique index on
        ``id`` turns a concurrent collision into a StoreError.
        """
        if not isinstance(payloads, list) or not payloads:
            raise ScheduleValidationError(EMPTY_BATCH_MESSAGE)

        created = []
        for index, candidate in enumerate(payloads):
            document = validate_candidate(candidate, index)

            with _store_errors(400):
                max_id = await schedule_crud.get_max_id(pool)
                new_id = Schedule.next_id(max_id)
                db_record = await schedule_crud.insert(
                    pool, new_id, document.model_dump()
                )

            created.append(_build_schedule_response(db_record))

        logger.info(f"Created {len(created)} schedule(s)")
        return created

    @staticmethod
    async def update_schedule(
        pool: asyncpg.Pool, key: str, patch: Any
    ) -> ScheduleResponse:
        update_data = validate_changes(patch)

        with _store_errors(400):
            if update_data:
                db_record = await schedule_crud.update_by_key(pool, key, update_data)
            else:
                db_record = await schedule_crud.get_by_key(pool, key)

        if db_record is None:
            raise ScheduleNotFoundError()
        return _build_schedule_response(db_record)

    @staticmethod
    async def delete_schedule(pool: asyncpg.Pool, key: str) -> None:
        with _store_errors(500):
            db_record = await schedule_crud.delete_by_key(pool, key)
        if db_record is None:
            raise ScheduleNotFoundError()


schedule_service = ScheduleService()
