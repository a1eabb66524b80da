import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

EMPLOYEES_KEY = "employees"
CACHE_TTL = 5 * 60  # 5 минут


def employee_key(employee_id: str) -> str:
    return f"employee:{employee_id}"


def employees_search_key(query: str) -> str:
    return f"{EMPLOYEES_KEY}:search:{query.strip().lower()}"


def employees_department_key(department: str) -> str:
    return f"{EMPLOYEES_KEY}:department:{department}"


class RedisCache:
    """JSON values in redis. Failures are logged and read as a miss."""

    def __init__(self, client: redis.Redis, ttl: int = CACHE_TTL):
        self.client = client
        self.ttl = ttl

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            logger.warning("cache get %s failed: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("cache entry %s is not valid JSON: %s", key, e)
            return None

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.client.setex(key, self.ttl, json.dumps(value, default=str))
        except RedisError as e:
            logger.warning("cache set %s failed: %s", key, e)

    async def invalidate(self, key: str) -> None:
        """Drop ``key`` and every derived ``key:*`` entry."""
        try:
            await self.client.delete(key)
            async for derived in self.client.scan_iter(match=f"{key}:*"):
                await self.client.delete(derived)
        except RedisError as e:
            logger.warning("cache invalidate %s failed: %s", key, e)

    async def remove(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.warning("cache remove %s failed: %s", key, e)
