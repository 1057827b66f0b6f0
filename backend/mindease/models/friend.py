"""
MindEase Backend — Friend Relation Model
==========================================

What:  ORM model for the `friends` table.

One directed row per relation: user_id sent the request to friend_id.
    status = 'pending'   visible as an incoming request to friend_id only
    status = 'accepted'  counts as a friendship for BOTH user_id and friend_id

user_id <> friend_id is enforced, so an accepted row is counted once for
each side and never twice for the same user.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mindease.models.base import Base, utcnow

FRIEND_STATUS_PENDING = "pending"
FRIEND_STATUS_ACCEPTED = "accepted"


class FriendRelation(Base):
    __tablename__ = "friends"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    friend_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=FRIEND_STATUS_PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        CheckConstraint("user_id <> friend_id", name="ck_friends_not_self"),
        CheckConstraint(
            "status IN ('pending', 'accepted')",
            name="ck_friends_status",
        ),
        Index("idx_friends_user_status", "user_id", "status"),
        Index("idx_friends_friend_status", "friend_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<FriendRelation(id={self.id}, user_id={self.user_id}, "
            f"friend_id={self.friend_id}, status='{self.status}')>"
        )
