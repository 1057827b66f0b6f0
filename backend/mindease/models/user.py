"""
MindEase Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table.
Who:   Written by registration, profile update, and avatar upload; read by
       login, profile fetch, and every author-name enrichment.

Table Design:
    - Integer primary key (referenced by every other table)
    - email UNIQUE: registration relies on it when two requests race
    - password holds the bcrypt hash, never the plain text
    - name is nullable: the profile PUT overwrites absent fields with NULL
    - free-text fields are TEXT, so long input is stored rather than rejected
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mindease.models.base import Base, utcnow


class User(Base):
    """A registered student account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Identity ──────────────────────────────────────────────────────────
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash",
    )

    # ── Academic scope ────────────────────────────────────────────────────
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    batch: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Profile ───────────────────────────────────────────────────────────
    nickname: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
