"""
MindEase Backend — Chat Message Model
=======================================

What:  ORM model for the `chats` table (private assistant messages).
Lifecycle: append-only; rows are never updated or deleted.

Query pattern:
    SELECT ... WHERE user_id = :id ORDER BY created_at ASC
    → served by idx_chats_user_created
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from mindease.models.base import Base, utcnow


class ChatMessage(Base):
    __tablename__ = "chats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_chats_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ChatMessage(id={self.id}, user_id={self.user_id})>"
