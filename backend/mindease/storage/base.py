"""
MindEase Backend — Abstract Persistence Adapter
=================================================

What:  The contract every storage backend implements.
How:   Concrete stores inherit from DataStore and implement each coroutine.
       Services depend only on this interface, never on a driver or ORM.
Who:   Called by the aggregation service and the resource services.

Contract summary:
    insert(entity, fields)                  -> new id
    insert_ignore(entity, fields)           -> True if a row was written
    find_one(entity, filters)               -> record dict or None
    find_many(entity, filters, order_by)    -> list of record dicts
    update(entity, record_id, fields)       -> rows affected
    count(entity, filters)                  -> int

Filters are conjunctions of equality predicates; a None value matches NULL.
Every failure is raised as DataAccessError (ConstraintViolationError for
integrity violations).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

Record = Dict[str, Any]


class Entity(str, Enum):
    """Record types known to the persistence layer; values are table names."""

    USER = "users"
    CHAT = "chats"
    DISCUSSION = "discussions"
    POST_LIKE = "post_likes"
    POST_REPLY = "post_replies"
    FRIEND = "friends"


class DataStore(ABC):
    """
    Abstract interface over the backing database.

    Implementations:
        - SQLAlchemyStore: async SQLAlchemy (PostgreSQL, SQLite, MySQL)

    Each call is its own unit of work: a write is one atomic row operation
    and independent calls may be awaited concurrently.
    """

    @abstractmethod
    async def insert(self, entity: Entity, fields: Mapping[str, Any]) -> Any:
        """
        Insert one record and return its generated id.

        Raises:
            ConstraintViolationError: a unique/foreign/check constraint rejected the row
            DataAccessError: any other storage failure
        """
        ...

    @abstractmethod
    async def insert_ignore(self, entity: Entity, fields: Mapping[str, Any]) -> bool:
        """
        Insert one record unless its key already exists, atomically.

        The existence test is delegated to the table's primary/unique key
        (no read-then-write), so concurrent identical calls write one row.

        Returns:
            True when a row was written, False when it already existed.
        """
        ...

    @abstractmethod
    async def find_one(self, entity: Entity, filters: Mapping[str, Any]) -> Optional[Record]:
        """Return the first record matching all filters, or None."""
        ...

    @abstractmethod
    async def find_many(
        self,
        entity: Entity,
        filters: Mapping[str, Any],
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Record]:
        """
        Return every record matching all filters.

        Args:
            order_by: Single timestamp field to sort on (None = storage order)
            descending: Sort direction for order_by

        Ties on order_by come back in the same order on every call.
        """
        ...

    @abstractmethod
    async def update(self, entity: Entity, record_id: Any, fields: Mapping[str, Any]) -> int:
        """Overwrite the given fields on one record; returns rows affected (0 or 1)."""
        ...

    @abstractmethod
    async def count(self, entity: Entity, filters: Mapping[str, Any]) -> int:
        """Count records matching all filters."""
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip to the backend; raises DataAccessError when unreachable."""
        ...
