"""MindEase Backend — Chat Route Handlers (GET /chats/{userId}, POST /chats)."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path

from mindease.database import get_store
from mindease.schemas.chat import ChatCreateRequest, ChatMessageOut
from mindease.schemas.common import MAX_RECORD_ID, ErrorResponse, MessageResponse
from mindease.services.chat_service import chat_service
from mindease.storage.base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["Chats"])


@router.get(
    "/{user_id}",
    response_model=List[ChatMessageOut],
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List a user's chat messages, oldest first",
)
async def list_chats(
    user_id: int = Path(ge=1, le=MAX_RECORD_ID),
    store: DataStore = Depends(get_store),
) -> List[ChatMessageOut]:
    return await chat_service.list_for_user(store, user_id)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing userId or blank content", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Append a chat message",
)
async def create_chat(
    payload: ChatCreateRequest,
    store: DataStore = Depends(get_store),
) -> MessageResponse:
    return await chat_service.create(store, payload)
