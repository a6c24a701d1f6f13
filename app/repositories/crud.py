"""
CRUD operations for schedules.

This module contains all database operations for schedule documents,
providing a clean interface between the service layer and the database.
Every record can be addressed by its sequential external ``id`` or by its
store-assigned ``uid``.
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import asyncpg
import json
from loguru import logger

SCHEDULE_COLUMNS = (
    "uid, id, division, level, term, year, days, created_at, updated_at"
)

# Columns a client may change through an update
UPDATABLE_COLUMNS = ("division", "level", "term", "year", "days")

_MAX_BIGINT = 2**63 - 1

# Picks a single row matching either key, preferring the external id
_MATCH_KEY = """
    uid = (
        SELECT uid FROM schedules
        WHERE id = $1 OR uid = $2
        ORDER BY (id = $1) DESC NULLS LAST
        LIMIT 1
    )
"""


def resolve_key(key: str) -> Tuple[Optional[int], Optional[UUID]]:
    """
    Interpret a path key as an external id and/or an internal uid.

    Returns:
        (external_id, uid); either is None when the key cannot be that kind
        of identifier.
    """
    external_id = None
    if key.isascii() and key.isdigit():
        value = int(key)
        if value <= _MAX_BIGINT:
            external_id = value

    try:
        uid = UUID(key)
    except ValueError:
        uid = None

    return external_id, uid


class ScheduleCRUD:
    """CRUD operations for schedule documents."""

    @staticmethod
    async def get_all(pool: asyncpg.Pool) -> List[asyncpg.Record]:
        """
        Get all schedules.

        Returns:
            List of all schedule records, ordered by external id
        """
        async with pool.acquire() as conn:
            return await conn.fetch(
                f"SELECT {SCHEDULE_COLUMNS} FROM schedules ORDER BY id;"
            )

    @staticmethod
    async def get_by_key(pool: asyncpg.Pool, key: str) -> Optional[asyncpg.Record]:
        """
        Get a schedule by external id or internal uid.

        Args:
            key: Path key as received from the client

        Returns:
            Schedule record or None if not found
        """
        external_id, uid = resolve_key(key)
        if external_id is None and uid is None:
            return None

        async with pool.acquire() as conn:
            return await conn.fetchrow(
                f"SELECT {SCHEDULE_COLUMNS} FROM schedules WHERE {_MATCH_KEY};",
                external_id,
                uid,
            )

    @staticmethod
    async def get_max_id(pool: asyncpg.Pool) -> Optional[int]:
        """Highest external id in the store, or None when it is empty."""
        async with pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT id FROM schedules ORDER BY id DESC LIMIT 1;"
            )

    @staticmethod
    async def insert(
        pool: asyncpg.Pool, schedule_id: int, document: Dict[str, Any]
    ) -> asyncpg.Record:
        """
        Insert a new schedule document.

        Args:
            schedule_id: External id assigned by the caller
            document: Validated schedule fields (division, level, term, year, days)

        Raises:
            asyncpg.UniqueViolationError: If another insert already took the id
        """
        async with pool.acquire() as conn:
            record = await conn.fetchrow(
                f"""
                INSERT INTO schedules (id, division, level, term, year, days)
                VALUES ($1, $2, $3, $4, $5, $6::jsonb)
                RETURNING {SCHEDULE_COLUMNS};
                """,
                schedule_id,
                document["division"],
                document["level"],
                document["term"],
                document["year"],
                json.dumps(document["days"]),
            )
            logger.info(f"Schedule {schedule_id} inserted")
            return record

    @staticmethod
    async def update_by_key(
        pool: asyncpg.Pool, key: str, update_data: Dict[str, Any]
    ) -> Optional[asyncpg.Record]:
        """
        Apply a partial update to the schedule matching ``key``.

        Args:
            key: External id or internal uid
            update_data: Fields to overwrite; keys outside UPDATABLE_COLUMNS are ignored

        Returns:
            The updated record, or None if no schedule matches
        """
        external_id, uid = resolve_key(key)
        if external_id is None and uid is None:
            return None

        update_fields = []
        values = []
        param_idx = 3  # $1 and $2 are the key

        for field in UPDATABLE_COLUMNS:
            if field not in update_data:
                continue
            value = update_data[field]
            if field == "days":
                update_fields.append(f"days = ${param_idx}::jsonb")
                values.append(json.dumps(value))
            else:
                update_fields.append(f"{field} = ${param_idx}")
                values.append(value)
            param_idx += 1

        update_fields.append("updated_at = NOW()")

        async with pool.acquire() as conn:
            record = await conn.fetchrow(
                f"""
                UPDATE schedules
                SET {', '.join(update_fields)}
                WHERE {_MATCH_KEY}
                RETURNING {SCHEDULE_COLUMNS};
                """,
                external_id,
                uid,
                *values,
            )
            if record is not None:
                logger.info(f"Schedule {record['id']} updated")
            return record

    @staticmethod
    async def delete_by_key(pool: asyncpg.Pool, key: str) -> Optional[asyncpg.Record]:
        """
        Delete the schedule matching ``key``.

        Returns:
            The deleted record, or None if no schedule matches
        """
        external_id, uid = resolve_key(key)
        if external_id is None and uid is None:
            return None

        async with pool.acquire() as conn:
            record = await conn.fetchrow(
                f"DELETE FROM schedules WHERE {_MATCH_KEY} RETURNING {SCHEDULE_COLUMNS};",
                external_id,
                uid,
            )
            if record is not None:
                logger.info(f"Schedule {record['id']} deleted")
            return record


# Instance for easy importing
schedule_crud = ScheduleCRUD()
