import enum
import logging
from typing import Sequence

from sqlalchemy import and_, or_, select, delete as sa_delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from src.errors import NotFoundError, UpstreamError, ValidationError
from src.shifts.models import Shift
from src.storage.base import AnyOf, Condition
from src.users.models import User

logger = logging.getLogger(__name__)

TABLES = {
    "users": User,
    "shifts": Shift,
}


class SqlRecordStore:
    """Record store backed by the application's SQLAlchemy async engine."""

    def __init__(self, session_maker: async_sessionmaker, tables: dict = None):
        self.session_maker = session_maker
        self.tables = tables or TABLES

    def _model(self, table: str):
        try:
            return self.tables[table]
        except KeyError:
            raise ValidationError(f"Unknown table: {table}")

    def _column(self, model, name: str):
        if name not in model.__table__.columns:
            raise ValidationError(f"Unknown column {model.__tablename__}.{name}")
        return getattr(model, name)

    def _clause(self, model, condition: Condition):
        if isinstance(condition, AnyOf):
            return or_(*(self._clause(model, f) for f in condition.filters))
        column = self._column(model, condition.column)
        if condition.op == "eq":
            return column == condition.value
        if condition.op == "lt":
            return column < condition.value
        if condition.op == "gt":
            return column > condition.value
        if condition.op == "gte":
            return column >= condition.value
        if condition.op == "lte":
            return column <= condition.value
        if condition.op == "ilike":
            return column.ilike(condition.value, escape="\\")
        if condition.op == "in":
            return column.in_(condition.value)
        raise ValidationError(f"Unsupported filter operator: {condition.op}")

    @staticmethod
    def _row(obj) -> dict:
        row = {}
        for column in obj.__table__.columns:
            value = getattr(obj, column.key)
            row[column.key] = value.value if isinstance(value, enum.Enum) else value
        return row

    def _check_values(self, model, values: dict) -> None:
        for name in values:
            self._column(model, name)

    async def read_many(self, table: str, filters: Sequence[Condition] = ()) -> list[dict]:
        model = self._model(table)
        stmt = select(model)
        clauses = [self._clause(model, f) for f in filters]
        if clauses:
            stmt = stmt.where(and_(*clauses))
        stmt = stmt.order_by(model.created_at, model.id)
        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return [self._row(obj) for obj in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            logger.error("read_many %s failed: %s", table, e)
            raise UpstreamError(str(e))

    async def read_one(self, table: str, id: str) -> dict:
        model = self._model(table)
        try:
            async with self.session_maker() as session:
                obj = await session.get(model, id)
        except (SQLAlchemyError, OSError) as e:
            logger.error("read_one %s/%s failed: %s", table, id, e)
            raise UpstreamError(str(e))
        if obj is None:
            raise NotFoundError(f"{table} record {id} not found")
        return self._row(obj)

    async def insert(self, table: str, rows: Sequence[dict]) -> list[dict]:
        model = self._model(table)
        for values in rows:
            self._check_values(model, values)
        try:
            async with self.session_maker() as session:
                objects = [model(**values) for values in rows]
                session.add_all(objects)
                await session.commit()
                for obj in objects:
                    await session.refresh(obj)
                return [self._row(obj) for obj in objects]
        except IntegrityError as e:
            logger.warning("insert into %s rejected: %s", table, e.orig)
            raise ValidationError(str(e.orig))
        except (SQLAlchemyError, OSError) as e:
            logger.error("insert into %s failed: %s", table, e)
            raise UpstreamError(str(e))

    async def update(self, table: str, id: str, values: dict) -> dict:
        model = self._model(table)
        self._check_values(model, values)
        try:
            async with self.session_maker() as session:
                obj = await session.get(model, id)
                if obj is None:
                    raise NotFoundError(f"{table} record {id} not found")
                for name, value in values.items():
                    setattr(obj, name, value)
                await session.commit()
                await session.refresh(obj)
                return self._row(obj)
        except IntegrityError as e:
            logger.warning("update of %s/%s rejected: %s", table, id, e.orig)
            raise ValidationError(str(e.orig))
        except (SQLAlchemyError, OSError) as e:
            logger.error("update of %s/%s failed: %s", table, id, e)
            raise UpstreamError(str(e))

    async def delete(self, table: str, id: str) -> None:
        model = self._model(table)
        try:
            async with self.session_maker() as session:
                result = await session.execute(sa_delete(model).where(model.id == id))
                if result.rowcount == 0:
                    raise NotFoundError(f"{table} record {id} not found")
                await session.commit()
        except IntegrityError as e:
            logger.warning("delete of %s/%s rejected: %s", table, id, e.orig)
            raise ValidationError("Record is still referenced by other data")
        except (SQLAlchemyError, OSError) as e:
            logger.error("delete of %s/%s failed: %s", table, id, e)
            raise UpstreamError(str(e))
