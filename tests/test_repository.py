"""
Unit tests for app.repositories.crud.

The asyncpg pool is a MagicMock whose acquire() yields an AsyncMock
connection, so these tests check key resolution and the SQL arguments.
"""

import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.repositories.crud import ScheduleCRUD, resolve_key

from tests.conftest import make_db_record


@pytest.fixture
def conn():
    return AsyncMock()


@pytest.fixture
def pool(conn):
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    pool.acquire.return_value.__aexit__.return_value = False
    return pool


class TestResolveKey:
    def test_external_id(self):
        assert resolve_key("12") == (12, None)

    def test_internal_id(self):
        uid = uuid.uuid4()
        assert resolve_key(str(uid)) == (None, uid)

    def test_garbage(self):
        assert resolve_key("abc") == (None, None)

    def test_negative_is_not_an_id(self):
        assert resolve_key("-1") == (None, None)

    def test_out_of_range_id(self):
        assert resolve_key("9" * 30) == (None, None)

    def test_non_ascii_digits(self):
        assert resolve_key("١٢") == (None, None)

    def test_hex_uuid_of_digits_is_both(self):
        key = "1" * 32
        external_id, uid = resolve_key(key)
        assert external_id is None  # beyond BIGINT
        assert uid == uuid.UUID(key)


class TestGetAll:
    @pytest.mark.asyncio
    async def test_orders_by_id(self, pool, conn):
        conn.fetch.return_value = [make_db_record()]
        result = await ScheduleCRUD.get_all(pool)
        assert len(result) == 1
        assert "ORDER BY id" in conn.fetch.await_args.args[0]


class TestGetByKey:
    @pytest.mark.asyncio
    async def test_passes_both_keys(self, pool, conn):
        uid = uuid.uuid4()
        conn.fetchrow.return_value = make_db_record(uid=uid)
        await ScheduleCRUD.get_by_key(pool, str(uid))
        assert conn.fetchrow.await_args.args[1:] == (None, uid)

    @pytest.mark.asyncio
    async def test_unusable_key_skips_query(self, pool, conn):
        assert await ScheduleCRUD.get_by_key(pool, "not-a-key") is None
        pool.acquire.assert_not_called()


class TestGetMaxId:
    @pytest.mark.asyncio
    async def test_empty_store(self, pool, conn):
        conn.fetchval.return_value = None
        assert await ScheduleCRUD.get_max_id(pool) is None
        assert "ORDER BY id DESC LIMIT 1" in conn.fetchval.await_args.args[0]


class TestInsert:
    @pytest.mark.asyncio
    async def test_days_sent_as_json(self, pool, conn):
        conn.fetchrow.return_value = make_db_record(id=4)
        days = [{"name": "Monday", "subjects": []}]
        document = {
            "division": "A", "level": "First", "term": "Fall", "year": "2024", "days": days,
        }
        record = await ScheduleCRUD.insert(pool, 4, document)
        assert record["id"] == 4
        args = conn.fetchrow.await_args.args
        assert args[1:6] == (4, "A", "First", "Fall", "2024")
        assert json.loads(args[6]) == days


class TestUpdateByKey:
    @pytest.mark.asyncio
    async def test_builds_set_clause(self, pool, conn):
        conn.fetchrow.return_value = make_db_record(id=1, level="Second")
        await ScheduleCRUD.update_by_key(
            pool, "1", {"level": "Second", "days": [], "id": 99}
        )
        query, *params = conn.fetchrow.await_args.args
        assert "level = $3" in query
        assert "days = $4::jsonb" in query
        assert "updated_at = NOW()" in query
        assert params == [1, None, "Second", "[]"]

    @pytest.mark.asyncio
    async def test_not_found(self, pool, conn):
        conn.fetchrow.return_value = None
        assert await ScheduleCRUD.update_by_key(pool, "1", {"level": "Second"}) is None


class TestDeleteByKey:
    @pytest.mark.asyncio
    async def test_returns_deleted_row(self, pool, conn):
        conn.fetchrow.return_value = make_db_record(id=2)
        record = await ScheduleCRUD.delete_by_key(pool, "2")
        assert record["id"] == 2
        assert conn.fetchrow.await_args.args[0].startswith("DELETE FROM schedules")

    @pytest.mark.asyncio
    async def test_missing(self, pool, conn):
        conn.fetchrow.return_value = None
        assert await ScheduleCRUD.delete_by_key(pool, "2") is None
