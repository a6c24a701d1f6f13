"""
FastAPI dependencies for database access.
"""

import asyncpg

from .exceptions import StoreError
from .postgres import get_postgres


async def get_db_pool() -> asyncpg.Pool:
    """
    FastAPI dependency that provides the database connection pool.

    Raises:
        StoreError: If the pool is not available.
    """
    try:
        return await get_postgres()
    except ConnectionError as e:
        raise StoreError("Database unavailable", error=str(e)) from e
