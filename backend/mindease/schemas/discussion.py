"""
MindEase Backend — Discussion Schemas
=======================================

What:  Models for discussion posts, likes, and replies.

Discussion and reply payloads echo every stored column plus the author
`name` attached by the aggregation service.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from mindease.schemas.common import MAX_RECORD_ID


class DiscussionOut(BaseModel):
    id: int
    user_id: int
    batch: Optional[str] = None
    department: Optional[str] = None
    content: str
    file_path: Optional[str] = None
    is_public: bool = False
    created_at: datetime
    name: Optional[str] = Field(default=None, description="Author display name")


class ReplyOut(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    file_path: Optional[str] = None
    created_at: datetime
    name: Optional[str] = Field(default=None, description="Author display name")


class LikeRequest(BaseModel):
    user_id: Optional[int] = Field(default=None, ge=1, le=MAX_RECORD_ID)


class LikeCountResponse(BaseModel):
    total: int = Field(description="Number of distinct users who liked the post")
