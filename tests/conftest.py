import fnmatch
from datetime import datetime, timedelta

import pytest
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.auth.context import AuthContext, Identity
from src.database import metadata
from src.errors import UpstreamError
from src.storage.objects import LocalObjectStore
from src.storage.sql import SqlRecordStore
from src.users.schemas import UserRole

BASE_TIME = datetime(2024, 1, 1, 8, 0)


class FakeRedis:
    """Just enough of ``redis.asyncio.Redis`` (decode_responses=True)."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = str(value)
        if ex:
            self.ttls[key] = ex

    async def setex(self, key, ttl, value):
        await self.set(key, value, ex=ttl)

    async def incr(self, key):
        value = int(self.data.get(key, 0)) + 1
        self.data[key] = str(value)
        return value

    async def expire(self, key, ttl):
        self.ttls[key] = ttl

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def scan_iter(self, match="*"):
        for key in list(self.data):
            if fnmatch.fnmatchcase(key, match):
                yield key


class BrokenRedis(FakeRedis):
    async def get(self, key):
        raise RedisError("connection refused")

    async def setex(self, key, ttl, value):
        raise RedisError("connection refused")

    async def delete(self, *keys):
        raise RedisError("connection refused")


class FakeCache:
    """In-memory cache that records what was dropped."""

    def __init__(self):
        self.data = {}
        self.invalidated = []
        self.removed = []

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value

    async def invalidate(self, key):
        self.invalidated.append(key)
        for existing in list(self.data):
            if existing == key or existing.startswith(f"{key}:"):
                del self.data[existing]

    async def remove(self, key):
        self.removed.append(key)
        self.data.pop(key, None)


class RecordingStore:
    """Wraps a record store, logging calls and optionally failing some of them."""

    def __init__(self, inner, fail_on=()):
        self.inner = inner
        self.fail_on = set(fail_on)
        self.calls = []

    async def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise UpstreamError(f"{name} unavailable")
        return await getattr(self.inner, name)(*args)

    async def read_many(self, table, filters=()):
        return await self._call("read_many", table, filters)

    async def read_one(self, table, id):
        return await self._call("read_one", table, id)

    async def insert(self, table, rows):
        return await self._call("insert", table, rows)

    async def update(self, table, id, values):
        return await self._call("update", table, id, values)

    async def delete(self, table, id):
        return await self._call("delete", table, id)


class RecordingObjectStore:
    def __init__(self, inner=None, fail=False):
        self.inner = inner
        self.fail = fail
        self.puts = []

    async def put(self, bucket, key, data):
        self.puts.append((bucket, key))
        if self.fail:
            raise UpstreamError("Storage bucket unavailable")
        if self.inner is None:
            return f"/media/{bucket}/{key}"
        return await self.inner.put(bucket, key, data)


def make_ctx(user_id, role=UserRole.EMPLOYEE, email=None):
    return AuthContext(Identity(id=user_id, email=email or f"{user_id}@example.com", role=role))


@pytest.fixture
def admin_ctx():
    return make_ctx("admin-1", UserRole.ADMIN)


@pytest.fixture
def employee_ctx():
    return make_ctx("e1")


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def store(session_maker):
    return SqlRecordStore(session_maker)


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def objects(tmp_path):
    return LocalObjectStore(str(tmp_path / "media"), "/media")


@pytest.fixture
async def seed_users(store):
    """Admin plus two employees, inserted in a fixed order."""

    async def seed(*rows):
        created = []
        for i, row in enumerate(rows):
            row = {"created_at": BASE_TIME + timedelta(minutes=i), **row}
            created.extend(await store.insert("users", [row]))
        return created

    await seed(
        {"id": "admin-1", "email": "admin@example.com", "first_name": "Ada", "last_name": "Admin", "role": "admin"},
        {"id": "e1", "email": "olena@example.com", "first_name": "Olena", "last_name": "Koval",
         "role": "employee", "department": "Kitchen", "hourly_rate": 20},
        {"id": "e2", "email": "taras@example.com", "first_name": "Taras", "last_name": "Shevchenko",
         "role": "employee", "department": "Bar", "hourly_rate": 18},
    )
    return seed
