import json
import logging
from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# All helpers tolerate redis=None and Redis errors: the cache is an optimization only.

async def cache_get(redis: Redis | None, key: str):
    if redis is None:
        return None
    try:
        if val := await redis.get(key):
            return json.loads(val)
    except Exception as e:
        logger.warning("cache_get failed key=%s err=%s", key, e)
    return None

async def cache_set(redis: Redis | None, key: str, value, ex: int = 60):
    if redis is None:
        return
    try:
        await redis.set(key, json.dumps(value), ex=ex)
    except Exception as e:
        logger.warning("cache_set failed key=%s err=%s", key, e)

async def counter_incr(redis: Redis | None, key: str) -> int | None:
    if redis is None:
        return None
    try:
        return await redis.incr(key)
    except Exception as e:
        logger.warning("counter_incr failed key=%s err=%s", key, e)
        return None

async def counter_get(redis: Redis | None, key: str) -> int:
    if redis is None:
        return 0
    try:
        val = await redis.get(key)
        return int(val) if val else 0
    except Exception as e:
        logger.warning("counter_get failed key=%s err=%s", key, e)
        return 0
