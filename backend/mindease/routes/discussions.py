"""
MindEase Backend — Discussion Route Handlers
==============================================

What:  Discussion posts (class, department, public), likes, and replies.

Route Inventory:
    POST /discussions                    multipart, any visibility shape
    GET  /discussions?batch=&department= class-scoped, newest first
    POST /discussions/department         multipart, department-scoped
    GET  /discussions/department/{dept}  department-scoped, newest first
    GET  /discussions/public/all         public, newest first
    POST /discussions/{id}/like          idempotent
    GET  /discussions/{id}/likes         {total}
    POST /discussions/{id}/reply         multipart
    GET  /discussions/{id}/replies       oldest first

Multipart form fields arrive as strings; user ids are coerced to int by
FastAPI (a non-numeric or out-of-range id is a 400 through the validation
handler).
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from mindease.database import get_store
from mindease.schemas.common import MAX_RECORD_ID, CreatedResponse, ErrorResponse, SuccessResponse
from mindease.schemas.discussion import (
    DiscussionOut,
    LikeCountResponse,
    LikeRequest,
    ReplyOut,
)
from mindease.services.discussion_service import discussion_service
from mindease.services.file_service import FileService, get_file_service, read_upload
from mindease.storage.base import DataStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/discussions", tags=["Discussions"])

_TRUE_VALUES = {"true", "1", "on", "yes"}

_WRITE_ERRORS = {
    400: {"description": "Missing required field or bad upload", "model": ErrorResponse},
    404: {"description": "User or discussion not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def _form_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


# ── Create ────────────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=CreatedResponse,
    responses=_WRITE_ERRORS,
    summary="Create a class, department, or public discussion",
)
async def create_discussion(
    user_id: Optional[int] = Form(default=None, ge=1, le=MAX_RECORD_ID),
    content: Optional[str] = Form(default=None),
    batch: Optional[str] = Form(default=None),
    department: Optional[str] = Form(default=None),
    is_public: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    store: DataStore = Depends(get_store),
    files: FileService = Depends(get_file_service),
) -> CreatedResponse:
    attachment = await read_upload(file)
    return await discussion_service.create(
        store,
        files,
        user_id=user_id,
        content=content,
        batch=batch,
        department=department,
        is_public=_form_bool(is_public),
        attachment=attachment,
    )


@router.post(
    "/department",
    response_model=CreatedResponse,
    responses=_WRITE_ERRORS,
    summary="Create a department-scoped discussion",
)
async def create_department_discussion(
    user_id: Optional[int] = Form(default=None, ge=1, le=MAX_RECORD_ID),
    department: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    store: DataStore = Depends(get_store),
    files: FileService = Depends(get_file_service),
) -> CreatedResponse:
    attachment = await read_upload(file)
    return await discussion_service.create_department(
        store,
        files,
        user_id=user_id,
        department=department,
        content=content,
        attachment=attachment,
    )


# ── List ──────────────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=List[DiscussionOut],
    responses={400: {"description": "Missing batch or department", "model": ErrorResponse}},
    summary="List class-scoped discussions",
)
async def list_class_discussions(
    batch: Optional[str] = Query(default=None),
    department: Optional[str] = Query(default=None),
    store: DataStore = Depends(get_store),
) -> List[DiscussionOut]:
    return await discussion_service.list_class(store, batch, department)


@router.get(
    "/department/{dept}",
    response_model=List[DiscussionOut],
    summary="List department-scoped discussions",
)
async def list_department_discussions(
    dept: str,
    store: DataStore = Depends(get_store),
) -> List[DiscussionOut]:
    return await discussion_service.list_department(store, dept)


@router.get(
    "/public/all",
    response_model=List[DiscussionOut],
    summary="List public discussions",
)
async def list_public_discussions(
    store: DataStore = Depends(get_store),
) -> List[DiscussionOut]:
    return await discussion_service.list_public(store)


# ── Likes ─────────────────────────────────────────────────────────────────

@router.post(
    "/{post_id}/like",
    response_model=SuccessResponse,
    responses=_WRITE_ERRORS,
    summary="Like a discussion (idempotent)",
)
async def like_discussion(
    payload: LikeRequest,
    post_id: int = Path(ge=1, le=MAX_RECORD_ID),
    store: DataStore = Depends(get_store),
) -> SuccessResponse:
    return await discussion_service.like(store, post_id, payload.user_id)


@router.get(
    "/{post_id}/likes",
    response_model=LikeCountResponse,
    summary="Count likes on a discussion",
)
async def count_likes(
    post_id: int = Path(ge=1, le=MAX_RECORD_ID),
    store: DataStore = Depends(get_store),
) -> LikeCountResponse:
    return await discussion_service.like_count(store, post_id)


# ── Replies ───────────────────────────────────────────────────────────────

@router.post(
    "/{post_id}/reply",
    response_model=SuccessResponse,
    responses=_WRITE_ERRORS,
    summary="Reply to a discussion",
)
async def reply_to_discussion(
    post_id: int = Path(ge=1, le=MAX_RECORD_ID),
    user_id: Optional[int] = Form(default=None, ge=1, le=MAX_RECORD_ID),
    content: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    store: DataStore = Depends(get_store),
    files: FileService = Depends(get_file_service),
) -> SuccessResponse:
    attachment = await read_upload(file)
    return await discussion_service.reply(
        store,
        files,
        post_id=post_id,
        user_id=user_id,
        content=content,
        attachment=attachment,
    )


@router.get(
    "/{post_id}/replies",
    response_model=List[ReplyOut],
    summary="List replies, oldest first",
)
async def list_replies(
    post_id: int = Path(ge=1, le=MAX_RECORD_ID),
    store: DataStore = Depends(get_store),
) -> List[ReplyOut]:
    return await discussion_service.list_replies(store, post_id)
