"""
MindEase Backend — Discussion, Like, and Reply Models
=======================================================

What:  ORM models for `discussions`, `post_likes`, and `post_replies`.

Visibility shapes (one table):
    class-scoped       batch + department set, is_public false
    department-scoped  department set, batch NULL, is_public false
    public             is_public true

post_likes uses (post_id, user_id) as its primary key. The idempotent like
is an INSERT that ignores conflicts on this key, so a pair can never appear
twice.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column

from mindease.models.base import Base, utcnow


class Discussion(Base):
    """A discussion post; append-only."""

    __tablename__ = "discussions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # ── Scope ─────────────────────────────────────────────────────────────
    batch: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # ── Body ──────────────────────────────────────────────────────────────
    content: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Stored attachment name, relative to the upload directory",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index(
            "idx_discussions_scope",
            "department",
            "batch",
            "created_at",
            # MySQL only indexes a prefix of TEXT columns
            mysql_length={"department": 100, "batch": 20},
        ),
        Index("idx_discussions_public", "is_public", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Discussion(id={self.id}, user_id={self.user_id}, public={self.is_public})>"


class PostLike(Base):
    """One user's like on one discussion."""

    __tablename__ = "post_likes"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("discussions.id"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<PostLike(post_id={self.post_id}, user_id={self.user_id})>"


class PostReply(Base):
    """A reply under a discussion; append-only, listed oldest first."""

    __tablename__ = "post_replies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("discussions.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_post_replies_post_created", "post_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PostReply(id={self.id}, post_id={self.post_id})>"
