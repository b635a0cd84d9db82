"""
Database connection management using asyncpg.
"""

from typing import Optional

import asyncpg

from utils.logger import get_logger

logger = get_logger("Database")

_pool: Optional[asyncpg.Pool] = None


async def init_database(url: str) -> Optional[asyncpg.Pool]:
    """
    Initialize database connection pool.

    Args:
        url: PostgreSQL connection URL; empty disables the database

    Returns:
        The pool, or None when no URL is configured
    """
    global _pool

    if not url:
        logger.warning("DATABASE_URL not set - guild settings kept in memory")
        return None

    try:
        _pool = await asyncpg.create_pool(
            url,
            min_size=1,
            max_size=10,
            command_timeout=60,
        )
        logger.info("Database connected successfully")
        await _init_tables()
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise

    return _pool


async def _init_tables() -> None:
    """Initialize database tables if they don't exist."""
    if not _pool:
        return

    async with _pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS guild_settings (
                guild_id BIGINT PRIMARY KEY,
                name VARCHAR(100),
                prefix VARCHAR(5),
                left_at TIMESTAMP,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        logger.info("Database tables initialized")


async def close_database() -> None:
    """Close database connection pool."""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database connection closed")
