"""
Shared fixtures for the test suite.

Provides an in-memory stand-in for the schedule repository, an httpx test
client with the pool dependency overridden, and sample data factories.
"""

import copy
import json
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, patch

# Keep the test run from writing log files
os.environ.setdefault("ENABLE_FILE_LOGS", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import asyncpg
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.dependencies import get_db_pool
from app.main import app
from app.repositories.crud import UPDATABLE_COLUMNS, resolve_key

CRUD_PATH = "app.services.schedule_service.schedule_crud"
BASE = "http://test"


# ---------------------------------------------------------------------------
# Sample data helpers
# ---------------------------------------------------------------------------


def make_days(prof: Optional[str] = "Dr. Smith") -> List[Dict[str, Any]]:
    """Two days with one or two hour slots each."""
    item = {"subject": "Mathematics"}
    if prof is not None:
        item["prof"] = prof
    return [
        {
            "name": "Monday",
            "subjects": [
                {"hour": "08:00-09:00", "content": [item]},
                {
                    "hour": "09:00-10:00",
                    "content": [{"subject": "Physics", "prof": "Dr. Jones"}],
                },
            ],
        },
        {
            "name": "Tuesday",
            "subjects": [
                {"hour": "08:00-09:00", "content": [{"subject": "Chemistry", "prof": ""}]},
            ],
        },
    ]


def make_schedule_payload(**overrides) -> Dict[str, Any]:
    """A valid schedule as a client would submit it."""
    payload = {
        "division": "A",
        "level": "First",
        "term": "Fall",
        "year": "2024",
        "days": make_days(),
    }
    payload.update(overrides)
    return payload


def make_db_record(
    id: int = 1,
    uid: Optional[uuid.UUID] = None,
    days: Optional[List[Dict[str, Any]]] = None,
    **fields,
) -> Dict[str, Any]:
    """Create a dict that mimics an asyncpg.Record for a schedule row."""
    now = datetime(2024, 9, 1, 10, 0, 0, tzinfo=timezone.utc)
    record = {
        "uid": uid or uuid.uuid4(),
        "id": id,
        "division": "A",
        "level": "First",
        "term": "Fall",
        "year": "2024",
        # asyncpg hands JSONB back as text
        "days": json.dumps(make_days() if days is None else days),
        "created_at": now,
        "updated_at": now,
    }
    record.update(fields)
    return record


class FakeScheduleStore:
    """
    In-memory replacement for ScheduleCRUD.

    Mirrors the repository contract, including the unique index on ``id``.
    """

    def __init__(self):
        self.records: List[Dict[str, Any]] = []

    def _find(self, key: str) -> Optional[Dict[str, Any]]:
        external_id, uid = resolve_key(key)
        for record in self.records:
            if external_id is not None and record["id"] == external_id:
                return record
        for record in self.records:
            if uid is not None and record["uid"] == uid:
                return record
        return None

    async def get_all(self, pool):
        return sorted(
            (copy.deepcopy(r) for r in self.records), key=lambda r: r["id"]
        )

    async def get_by_key(self, pool, key):
        record = self._find(key)
        return copy.deepcopy(record) if record else None

    async def get_max_id(self, pool):
        if not self.records:
            return None
        return max(r["id"] for r in self.records)

    async def insert(self, pool, schedule_id, document):
        if any(r["id"] == schedule_id for r in self.records):
            raise asyncpg.UniqueViolationError(
                'duplicate key value violates unique constraint "schedules_id_key"'
            )
        record = make_db_record(
            id=schedule_id,
            days=document["days"],
            division=document["division"],
            level=document["level"],
            term=document["term"],
            year=document["year"],
        )
        self.records.append(record)
        return copy.deepcopy(record)

    async def update_by_key(self, pool, key, update_data):
        record = self._find(key)
        if record is None:
            return None
        for field in UPDATABLE_COLUMNS:
            if field in update_data:
                value = update_data[field]
                record[field] = json.dumps(value) if field == "days" else value
        return copy.deepcopy(record)

    async def delete_by_key(self, pool, key):
        record = self._find(key)
        if record is None:
            return None
        self.records.remove(record)
        return record


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_pool():
    """An AsyncMock standing in for asyncpg.Pool."""
    return AsyncMock()


@pytest.fixture
def fake_store():
    """Patch the service's repository with an in-memory store."""
    store = FakeScheduleStore()
    with patch(CRUD_PATH, store):
        yield store


@pytest.fixture
async def client(mock_pool):
    """httpx AsyncClient with the pool dependency overridden (no real DB)."""
    app.dependency_overrides[get_db_pool] = lambda: mock_pool

    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def schedule_payload() -> Dict[str, Any]:
    """Valid schedule payload."""
    return make_schedule_payload()
