"""Capability interfaces the services talk to.

Services never touch SQLAlchemy sessions, redis or the filesystem directly;
they go through a record store, an object store and a cache.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol, Sequence, Union


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    filters: tuple


Condition = Union[Filter, AnyOf]


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def ilike(column: str, pattern: str) -> Filter:
    """Case-insensitive LIKE; backslash escapes a literal % or _."""
    return Filter(column, "ilike", pattern)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, "in", tuple(values))


def any_of(*filters: Filter) -> AnyOf:
    return AnyOf(tuple(filters))


class RecordStore(Protocol):
    async def read_many(self, table: str, filters: Sequence[Condition] = ()) -> list[dict]:
        ...

    async def read_one(self, table: str, id: str) -> dict:
        ...

    async def insert(self, table: str, rows: Sequence[dict]) -> list[dict]:
        ...

    async def update(self, table: str, id: str, values: dict) -> dict:
        ...

    async def delete(self, table: str, id: str) -> None:
        ...


class ObjectStore(Protocol):
    async def put(self, bucket: str, key: str, data: bytes) -> str:
        ...


class Cache(Protocol):
    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...

    async def invalidate(self, key: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...
