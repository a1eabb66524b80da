import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.config import LOGIN_BLOCK_SECONDS, LOGIN_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


def _key(ip: str) -> str:
    return f"login_block:{ip}"


async def is_blocked(client: redis.Redis, ip: str) -> bool:
    try:
        attempts = await client.get(_key(ip))
    except RedisError as e:
        logger.warning("Login rate limit unavailable: %s", e)
        return False
    return attempts is not None and int(attempts) >= LOGIN_MAX_ATTEMPTS


async def register_failed_attempt(client: redis.Redis, ip: str):
    try:
        # Увеличиваем счётчик + устанавливаем TTL
        current = await client.incr(_key(ip))
        if current == 1:
            await client.expire(_key(ip), LOGIN_BLOCK_SECONDS)
    except RedisError as e:
        logger.warning("Could not record failed login for %s: %s", ip, e)


async def delete_attempt(client: redis.Redis, ip: str):
    try:
        await client.delete(_key(ip))
    except RedisError as e:
        logger.warning("Could not reset login attempts for %s: %s", ip, e)
