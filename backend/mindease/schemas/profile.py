"""
MindEase Backend — Profile Schemas
====================================

What:  Models for GET/PUT /profile and the avatar upload.

The profile response keeps the camelCase keys the web client reads
(friendsCount, pendingRequests, avatarUrl).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mindease.schemas.common import MAX_RECORD_ID


class ProfileUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    nickname: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime


class PendingRequestOut(BaseModel):
    request_id: int
    requester_id: int
    requester_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileResponse(BaseModel):
    user: ProfileUser
    friendsCount: int = Field(description="Accepted relations touching this user")
    pendingRequests: List[PendingRequestOut] = Field(default_factory=list)


class ProfileUpdateRequest(BaseModel):
    """
    PUT /profile body.

    Full-overwrite semantics: any of name/nickname/bio that is absent or
    blank is stored as null.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(default=None, alias="userId", ge=1, le=MAX_RECORD_ID)
    name: Optional[str] = None
    nickname: Optional[str] = None
    bio: Optional[str] = None


class AvatarResponse(BaseModel):
    avatarUrl: str
