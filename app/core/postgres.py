import asyncpg
from loguru import logger
from typing import Optional

from .config import settings

# Process-wide pool, created once by init_db()
conn_pool: Optional[asyncpg.Pool] = None


async def create_schedules_table(conn: asyncpg.Connection):
    """
    Create the ``schedules`` document table if it does not exist.

    Scalar fields live in columns; the nested days → hours → subjects tree is
    stored as a single JSONB document. ``uid`` is the store-assigned identity,
    ``id`` is the sequential external identifier guarded by a unique index.

    Args:
        conn (asyncpg.Connection): Active database connection
    """
    # gen_random_uuid() is built in from PostgreSQL 13; older servers need pgcrypto
    try:
        await conn.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")
    except Exception as e:
        logger.warning(f"Could not enable pgcrypto: {e}")

    schedules_exists = await conn.fetchval(
        """
        SELECT EXISTS (SELECT 1
                       FROM information_schema.tables
                       WHERE table_name = 'schedules');
        """
    )

    if schedules_exists:
        logger.info("Table 'schedules' already exists.")
        return

    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schedules
        (
            uid         UUID        PRIMARY KEY DEFAULT gen_random_uuid(),
            id          BIGINT      NOT NULL,
            division    TEXT        NOT NULL,
            level       TEXT        NOT NULL,
            term        TEXT        NOT NULL,
            year        TEXT        NOT NULL,
            days        JSONB       NOT NULL DEFAULT '[]'::jsonb,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),

            CONSTRAINT schedules_id_key UNIQUE (id)
        );
        """
    )
    logger.info("Table 'schedules' created.")


async def init_db():
    """
    Open the connection pool and make sure the schema exists.

    Raises:
        Exception: If the pool cannot be created or the schema cannot be set up.
            The application lifespan lets this propagate so the process stops.
    """
    global conn_pool
    try:
        logger.info("Connecting to PostgreSQL...")

        conn_pool = await asyncpg.create_pool(
            dsn=settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
            server_settings={"timezone": "UTC"},
        )
        logger.info("PostgreSQL connection pool established.")

        async with conn_pool.acquire() as conn:
            await create_schedules_table(conn)

    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


async def get_postgres() -> asyncpg.Pool:
    """
    Return the process-wide connection pool.

    Raises:
        ConnectionError: If init_db() has not run or failed.
    """
    if conn_pool is None:
        logger.warning("Connection pool is not initialized.")
        raise ConnectionError("Connection pool is not initialized.")
    return conn_pool


async def close_postgres() -> None:
    """Close the connection pool during application shutdown."""
    global conn_pool
    if conn_pool is None:
        logger.warning("No connection pool to close.")
        return

    try:
        logger.info("Closing PostgreSQL connection pool...")
        await conn_pool.close()
        logger.info("PostgreSQL connection pool closed.")
    finally:
        conn_pool = None
