"""
Pre-start script: wait until the database answers before the API or a worker boots.
"""

# Standard library imports
import asyncio
import sys

# Third-party imports
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from samadhan.core.caching.redis import redis_client
from samadhan.core.db import async_engine
from samadhan.core.monitoring.logging import get_logger
from samadhan.settings import settings

logger = get_logger("samadhan.pre_start")


async def check_database() -> bool:
    """Check if database is accessible and ready."""
    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database is ready")
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def check_cache() -> bool:
    """Redis is optional: a failure is reported but never blocks start-up."""
    if not settings.CACHE_ENABLED:
        return True
    try:
        await redis_client.ping()
        logger.info("Redis is ready")
    except RedisError as e:
        logger.warning(f"Redis is not reachable, analytics will run uncached: {e}")
    return True


async def wait_for_database(max_retries: int = 30, retry_interval: int = 2) -> bool:
    """
    Wait for database to be ready.

    Args:
        max_retries: Maximum number of connection attempts
        retry_interval: Seconds between retries

    Returns:
        True if database is ready, False otherwise
    """
    logger.info("Waiting for database to be ready...")

    for attempt in range(1, max_retries + 1):
        logger.info(f"Database connection attempt {attempt}/{max_retries}")

        if await check_database():
            return True

        if attempt < max_retries:
            await asyncio.sleep(retry_interval)

    logger.error(f"Failed to connect to database after {max_retries} attempts")
    return False


async def main() -> None:
    logger.info("Starting pre-start checks...")

    if not await wait_for_database():
        logger.error("Pre-start checks failed: Database is not available")
        sys.exit(1)
    await check_cache()
    await async_engine.dispose()

    logger.info("All pre-start checks passed")


if __name__ == "__main__":
    asyncio.run(main())
