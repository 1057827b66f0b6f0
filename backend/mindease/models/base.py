"""
MindEase Backend — ORM Base
=============================

What:  Declarative base shared by every model, plus the UTC clock used for
       server-assigned timestamps.
Who:   Imported by each model module, by Database.create_all(), and by Alembic.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic and
    Database.create_all() read.
    """
    pass


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)
