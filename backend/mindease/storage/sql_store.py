"""
MindEase Backend — SQLAlchemy Persistence Adapter
===================================================

What:  DataStore implementation over async SQLAlchemy.
How:   Every public call opens its own AsyncSession from the injected
       session factory, runs inside one transaction, and commits or rolls
       back before returning. Driver exceptions never leave this module:
       IntegrityError becomes ConstraintViolationError, every other
       SQLAlchemyError (including pool timeouts) and any driver-level
       OverflowError or ValueError becomes DataAccessError.
Who:   Constructed by mindease.database.Database; injected into routes via
       the get_store dependency.

Concurrency:
    AsyncSession is not safe for concurrent use, so no session is shared
    between calls. Concurrent calls (the aggregation fan-out) each borrow a
    pooled connection; once the pool is exhausted they queue for one.

Dialect-specific statements:
    insert_ignore() is the only place that branches on the dialect:
        postgresql  INSERT ... ON CONFLICT DO NOTHING
        sqlite      INSERT ... ON CONFLICT DO NOTHING
        mysql       INSERT IGNORE ...
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from sqlalchemy import asc, desc, func, insert, inspect, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mindease.exceptions import ConstraintViolationError, DataAccessError
from mindease.models import MODEL_BY_ENTITY
from mindease.storage.base import DataStore, Entity, Record

logger = logging.getLogger(__name__)


class SQLAlchemyStore(DataStore):
    """
    Relational DataStore backed by an async_sessionmaker.

    Args:
        session_factory: Factory bound to the application's engine
        dialect_name: engine.dialect.name, used by insert_ignore()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], dialect_name: str):
        self._session_factory = session_factory
        self._dialect_name = dialect_name

    # ── Unit of work ──────────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self, operation: str, entity: Optional[Entity] = None) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside a transaction and translate driver errors.

        Commits when the block exits cleanly, rolls back otherwise.
        """
        context = {"operation": operation}
        if entity is not None:
            context["entity"] = entity.value
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except IntegrityError as e:
            logger.warning("Constraint violation during %s: %s", operation, e.orig)
            context["error"] = str(e.orig)
            raise ConstraintViolationError(context=context) from e
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", operation, str(e))
            context["error"] = type(e).__name__
            raise DataAccessError(context=context) from e
        except (OverflowError, ValueError) as e:
            # Raised by drivers binding a parameter, outside SQLAlchemy's wrapping
            logger.error("Driver rejected a parameter during %s: %s", operation, str(e))
            context["error"] = type(e).__name__
            raise DataAccessError(context=context) from e

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _model(entity: Entity):
        try:
            return MODEL_BY_ENTITY[Entity(entity)]
        except (KeyError, ValueError):
            raise DataAccessError(context={"error": f"unknown entity {entity!r}"})

    @staticmethod
    def _column(model, field: str):
        columns = model.__table__.columns
        if field not in columns:
            raise DataAccessError(
                context={"error": f"unknown field {field!r} on {model.__tablename__}"}
            )
        return columns[field]

    def _conditions(self, model, filters: Mapping[str, Any]) -> list:
        # `column == None` compiles to IS NULL
        return [self._column(model, field) == value for field, value in filters.items()]

    def _check_fields(self, model, fields: Mapping[str, Any]) -> Dict[str, Any]:
        for field in fields:
            self._column(model, field)
        return dict(fields)

    @staticmethod
    def _to_record(obj) -> Record:
        return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}

    # ── DataStore API ─────────────────────────────────────────────────────

    async def insert(self, entity: Entity, fields: Mapping[str, Any]) -> Any:
        model = self._model(entity)
        values = self._check_fields(model, fields)
        async with self._session("insert", entity) as session:
            obj = model(**values)
            session.add(obj)
            await session.flush()
            identity = inspect(obj).identity
        # Single-column keys come back as the bare value
        return identity[0] if identity and len(identity) == 1 else identity

    async def insert_ignore(self, entity: Entity, fields: Mapping[str, Any]) -> bool:
        model = self._model(entity)
        values = self._check_fields(model, fields)

        # Column(default=...) also applies to Core inserts, so created_at is filled in
        if self._dialect_name == "postgresql":
            stmt = pg_insert(model).values(**values).on_conflict_do_nothing()
        elif self._dialect_name == "sqlite":
            stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing()
        elif self._dialect_name in ("mysql", "mariadb"):
            stmt = insert(model).values(**values).prefix_with("IGNORE")
        else:
            raise DataAccessError(
                context={"error": f"insert_ignore unsupported on {self._dialect_name}"}
            )

        async with self._session("insert_ignore", entity) as session:
            result = await session.execute(stmt)
            written = result.rowcount == 1
        return written

    async def find_one(self, entity: Entity, filters: Mapping[str, Any]) -> Optional[Record]:
        model = self._model(entity)
        query = select(model).where(*self._conditions(model, filters)).limit(1)
        async with self._session("find_one", entity) as session:
            obj = (await session.execute(query)).scalar_one_or_none()
            return self._to_record(obj) if obj is not None else None

    async def find_many(
        self,
        entity: Entity,
        filters: Mapping[str, Any],
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        model = self._model(entity)
        query = select(model).where(*self._conditions(model, filters))

        direction = desc if descending else asc
        if order_by is not None:
            query = query.order_by(direction(self._column(model, order_by)))
        # Primary key as tie-breaker keeps equal timestamps in a stable order
        query = query.order_by(*(direction(col) for col in model.__table__.primary_key.columns))

        async with self._session("find_many", entity) as session:
            rows = (await session.execute(query)).scalars().all()
            return [self._to_record(obj) for obj in rows]

    async def update(self, entity: Entity, record_id: Any, fields: Mapping[str, Any]) -> int:
        model = self._model(entity)
        values = self._check_fields(model, fields)
        stmt = update(model).where(self._column(model, "id") == record_id).values(**values)
        async with self._session("update", entity) as session:
            result = await session.execute(stmt)
            affected = result.rowcount
        return affected

    async def count(self, entity: Entity, filters: Mapping[str, Any]) -> int:
        model = self._model(entity)
        query = (
            select(func.count())
            .select_from(model)
            .where(*self._conditions(model, filters))
        )
        async with self._session("count", entity) as session:
            return (await session.execute(query)).scalar_one()

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))
