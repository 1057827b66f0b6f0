"""
MindEase Backend — Chat Service
=================================

What:  Lists and appends a user's private chat messages.

Missing-user policy:
    Listing chats for a user id that does not exist is a 404, checked
    explicitly before the chat query (an empty list means "exists, no
    messages").
"""

import logging
from typing import List

from mindease.exceptions import NotFoundError, ValidationError
from mindease.models import utcnow
from mindease.schemas.chat import ChatCreateRequest, ChatMessageOut
from mindease.schemas.common import MessageResponse
from mindease.services.aggregation_service import aggregation_service
from mindease.storage.base import DataStore, Entity

logger = logging.getLogger(__name__)


class ChatService:

    async def list_for_user(self, store: DataStore, user_id: int) -> List[ChatMessageOut]:
        """Messages for `user_id`, oldest first, each with the author's name."""
        if await store.find_one(Entity.USER, {"id": user_id}) is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        chats = await store.find_many(
            Entity.CHAT,
            {"user_id": user_id},
            order_by="created_at",
        )
        enriched = await aggregation_service.enrich_with_author(store, chats)
        return [
            ChatMessageOut(
                id=chat["id"],
                content=chat["content"],
                created_at=chat["created_at"],
                name=chat["name"],
            )
            for chat in enriched
        ]

    async def create(self, store: DataStore, payload: ChatCreateRequest) -> MessageResponse:
        if payload.user_id is None or not (payload.content or "").strip():
            raise ValidationError(message="Missing fields", field="content")

        if await store.find_one(Entity.USER, {"id": payload.user_id}) is None:
            raise NotFoundError(resource="user", resource_id=payload.user_id)

        chat_id = await store.insert(
            Entity.CHAT,
            {
                "user_id": payload.user_id,
                "content": payload.content,
                "created_at": utcnow(),
            },
        )
        logger.info("Chat message %s added for user %s", chat_id, payload.user_id)
        return MessageResponse(message="Message added successfully")


chat_service = ChatService()
