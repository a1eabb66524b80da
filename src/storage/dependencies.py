import redis.asyncio as redis
from fastapi import Depends

from src.config import MEDIA_ROOT, MEDIA_URL, REDIS_HOST, REDIS_PORT
from src.database import async_session_maker
from src.storage.cache import RedisCache
from src.storage.objects import LocalObjectStore
from src.storage.sql import SqlRecordStore

redis_client = redis.Redis(host=REDIS_HOST, port=int(REDIS_PORT), decode_responses=True)


def get_redis() -> redis.Redis:
    return redis_client


def get_record_store() -> SqlRecordStore:
    return SqlRecordStore(async_session_maker)


def get_object_store() -> LocalObjectStore:
    return LocalObjectStore(MEDIA_ROOT, MEDIA_URL)


def get_cache(client: redis.Redis = Depends(get_redis)) -> RedisCache:
    return RedisCache(client)
