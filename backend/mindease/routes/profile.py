"""
MindEase Backend — Profile Route Handlers
===========================================

What:  GET /profile/{id}, PUT /profile, POST /profile/upload.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from mindease.database import get_store
from mindease.exceptions import ValidationError
from mindease.schemas.common import MAX_RECORD_ID, ErrorResponse, MessageResponse
from mindease.schemas.profile import AvatarResponse, ProfileResponse, ProfileUpdateRequest
from mindease.services.file_service import FileService, get_file_service, read_upload
from mindease.services.profile_service import profile_service
from mindease.storage.base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Profile with friend count and pending requests",
)
async def get_profile(
    user_id: int = Path(ge=1, le=MAX_RECORD_ID),
    store: DataStore = Depends(get_store),
) -> ProfileResponse:
    return await profile_service.get_profile(store, user_id)


@router.put(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "userId missing", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Overwrite name, nickname, and bio",
)
async def update_profile(
    payload: ProfileUpdateRequest,
    store: DataStore = Depends(get_store),
) -> MessageResponse:
    """Full overwrite: fields missing from the body are stored as null."""
    return await profile_service.update_profile(store, payload)


@router.post(
    "/upload",
    response_model=AvatarResponse,
    responses={
        400: {"description": "Missing userId or file, or unsupported image", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Upload a profile picture",
)
async def upload_avatar(
    userId: Optional[int] = Form(default=None, ge=1, le=MAX_RECORD_ID),
    avatar: Optional[UploadFile] = File(default=None),
    store: DataStore = Depends(get_store),
    files: FileService = Depends(get_file_service),
) -> AvatarResponse:
    upload = await read_upload(avatar)
    if userId is None or upload is None:
        raise ValidationError(message="Missing userId or file", field="avatar")
    return await profile_service.upload_avatar(store, files, userId, upload)
