"""
MindEase Backend — ORM Models Package

Importing this package registers every table on Base.metadata.
MODEL_BY_ENTITY maps the storage-layer Entity names onto model classes.
"""

from mindease.models.base import Base, utcnow
from mindease.models.chat import ChatMessage
from mindease.models.discussion import Discussion, PostLike, PostReply
from mindease.models.friend import (
    FRIEND_STATUS_ACCEPTED,
    FRIEND_STATUS_PENDING,
    FriendRelation,
)
from mindease.models.user import User
from mindease.storage.base import Entity

MODEL_BY_ENTITY = {
    Entity.USER: User,
    Entity.CHAT: ChatMessage,
    Entity.DISCUSSION: Discussion,
    Entity.POST_LIKE: PostLike,
    Entity.POST_REPLY: PostReply,
    Entity.FRIEND: FriendRelation,
}

__all__ = [
    "Base",
    "utcnow",
    "User",
    "ChatMessage",
    "Discussion",
    "PostLike",
    "PostReply",
    "FriendRelation",
    "FRIEND_STATUS_ACCEPTED",
    "FRIEND_STATUS_PENDING",
    "MODEL_BY_ENTITY",
]
