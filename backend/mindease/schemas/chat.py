"""Chat request/response schemas (/chats)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mindease.schemas.common import MAX_RECORD_ID


class ChatCreateRequest(BaseModel):
    """POST /chats body; the wire name is camelCase `userId`."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId", ge=1, le=MAX_RECORD_ID)
    content: Optional[str] = None


class ChatMessageOut(BaseModel):
    id: int
    content: str
    created_at: datetime
    name: Optional[str] = None
