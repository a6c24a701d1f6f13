from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import JSONResponse
from loguru import logger
from typing import Any, Dict, List, Optional

import asyncpg

from ..core.dependencies import get_db_pool
from ..core.exceptions import (
    ScheduleNotFoundError,
    ScheduleValidationError,
    StoreError,
)
from ..schemas.schedule import (
    MessageResponse,
    ScheduleCreateRequest,
    ScheduleCreateResponse,
    ScheduleResponse,
)
from ..services.schedule_service import schedule_service

router = APIRouter(prefix="/schedules", tags=["schedules"])

ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    404: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def error_response(
    status_code: int, message: str, error: Optional[str] = None
) -> JSONResponse:
    """Build the ``{message, error}`` body used by every failing route."""
    body = MessageResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


def _detail(e: Exception) -> str:
    """Underlying store message when available."""
    if isinstance(e, StoreError) and e.error:
        return e.error
    return str(e)


@router.get("", response_model=List[ScheduleResponse], responses=ERROR_RESPONSES)
async def get_all_schedules(pool: asyncpg.Pool = Depends(get_db_pool)):
    """
    Retrieve every schedule.
    """
    try:
        return await schedule_service.list_schedules(pool)

    except Exception as e:
        logger.error(f"Failed to retrieve schedules: {e}")
        return error_response(500, "Failed to retrieve schedules", _detail(e))


@router.get("/{key}", response_model=ScheduleResponse, responses=ERROR_RESPONSES)
async def get_schedule(key: str, pool: asyncpg.Pool = Depends(get_db_pool)):
    """
    Retrieve a schedule by its sequential id or its internal ``_id``.
    """
    try:
        return await schedule_service.get_schedule(pool, key)

    except ScheduleNotFoundError as e:
        return error_response(404, e.message)
    except Exception as e:
        logger.error(f"Failed to retrieve schedule {key}: {e}")
        return error_response(500, "Failed to retrieve schedule", _detail(e))


@router.post(
    "",
    response_model=ScheduleCreateResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
async def create_schedules(
    request: ScheduleCreateRequest,
    pool: asyncpg.Pool = Depends(get_db_pool),
):
    """
    Create a batch of schedules.

    Ids are assigned sequentially in request order. The batch is not atomic:
    when a schedule fails, the ones before it stay created.
    """
    try:
        created = await schedule_service.create_schedules(pool, request.schedules)
        return ScheduleCreateResponse(
            message="Schedules created successfully", schedules=created
        )

    except ScheduleValidationError as e:
        return error_response(400, e.message, e.error)
    except StoreError as e:
        return error_response(e.status_code, "Failed to create schedules", e.error)
    except Exception as e:
        logger.error(f"Failed to create schedules: {e}")
        return error_response(500, "Failed to create schedules", str(e))


@router.put("/{key}", response_model=ScheduleResponse, responses=ERROR_RESPONSES)
async def update_schedule(
    key: str,
    patch: Dict[str, Any] = Body(...),
    pool: asyncpg.Pool = Depends(get_db_pool),
):
    """
    Update a schedule in place with a full or partial body.

    Only the fields present in the body are replaced.
    """
    try:
        return await schedule_service.update_schedule(pool, key, patch)

    except ScheduleNotFoundError as e:
        return error_response(404, e.message)
    except ScheduleValidationError as e:
        return error_response(400, e.message, e.error)
    except StoreError as e:
        return error_response(e.status_code, "Failed to update schedule", e.error)
    except Exception as e:
        logger.error(f"Failed to update schedule {key}: {e}")
        return error_response(500, "Failed to update schedule", str(e))


@router.delete(
    "/{key}",
    status_code=204,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
async def delete_schedule(key: str, pool: asyncpg.Pool = Depends(get_db_pool)):
    """
    Delete a schedule by its sequential id or its internal ``_id``.
    """
    try:
        await schedule_service.delete_schedule(pool, key)
        return Response(status_code=204)

    except ScheduleNotFoundError as e:
        return error_response(404, e.message)
    except Exception as e:
        logger.error(f"Failed to delete schedule {key}: {e}")
        return error_response(500, "Failed to delete schedule", _detail(e))


@router.options("", include_in_schema=False)
@router.options("/{key}", include_in_schema=False)
async def schedules_options():
    """
    Answer OPTIONS requests that are not CORS preflights.

    Preflights carrying Origin and Access-Control-Request-Method are
    answered by CORSMiddleware before reaching the router.
    """
    return Response(status_code=204, headers={"Allow": "GET, POST, PUT, DELETE, OPTIONS"})
