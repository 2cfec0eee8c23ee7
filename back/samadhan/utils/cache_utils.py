# Standard library imports
import json
from typing import Any

# Third-party imports
from redis.exceptions import RedisError

# Local application imports
from samadhan.core.caching.redis import redis_client
from samadhan.core.monitoring.logging import get_contextual_logger
from samadhan.settings import settings

logger = get_contextual_logger(__name__)


async def get_cached_data(cache_key: str) -> Any | None:
    """Get data from Redis cache if it exists"""
    if not settings.CACHE_ENABLED:
        return None
    try:
        cached_data = await redis_client.get(cache_key)
        if cached_data:
            return json.loads(cached_data)
        return None
    except (RedisError, ValueError) as e:
        logger.error(f"Error retrieving from cache: {str(e)}")
        return None


async def set_cached_data(cache_key: str, data: Any, expiry_seconds: int) -> None:
    """Set data in Redis cache with expiration time"""
    if not settings.CACHE_ENABLED:
        return
    try:
        await redis_client.set(cache_key, json.dumps(data, default=str), ex=expiry_seconds)
        logger.debug(f"Cached data with key: {cache_key} for {expiry_seconds} seconds")
    except (RedisError, TypeError) as e:
        logger.error(f"Error setting cache: {str(e)}")


async def invalidate_cache_pattern(pattern: str) -> None:
    """Invalidate all cache keys matching a pattern"""
    if not settings.CACHE_ENABLED:
        return
    try:
        keys = [key async for key in redis_client.scan_iter(match=pattern)]
        if keys:
            await redis_client.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except RedisError as e:
        logger.error(f"Error invalidating cache pattern {pattern}: {str(e)}")
