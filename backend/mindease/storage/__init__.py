"""
MindEase Backend — Persistence Adapter Package
================================================

What:  The storage interface (DataStore, Entity) services depend on.
       The SQLAlchemy implementation lives in mindease.storage.sql_store and
       is wired up by mindease.database.
"""

from mindease.storage.base import DataStore, Entity, Record

__all__ = ["DataStore", "Entity", "Record"]
