"""
MindEase Backend — Discussion Service
=======================================

What:  Creates and lists discussions in their three visibility shapes, and
       handles likes and replies.
How:   Writes go straight to the DataStore; list views go through the
       aggregation service for author names.
Who:   Called by the /discussions routes.

Visibility queries (disjoint):
    class       batch = :batch AND department = :dept AND is_public = false
    department  department = :dept AND batch IS NULL AND is_public = false
    public      is_public = true
    All three are newest first.

Attachments:
    An attachment is written to disk before its row. If the row insert
    fails, the file is removed again so no orphan stays behind.
"""

import logging
from typing import Any, Dict, List, Optional

from mindease.exceptions import NotFoundError, ValidationError
from mindease.models import utcnow
from mindease.schemas.common import CreatedResponse, SuccessResponse
from mindease.schemas.discussion import DiscussionOut, LikeCountResponse, ReplyOut
from mindease.services.aggregation_service import aggregation_service
from mindease.services.file_service import FileService, Upload
from mindease.storage.base import DataStore, Entity, Record

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DiscussionService:
    """Stateless; receives the DataStore (and FileService for uploads) per call."""

    # ── Shared helpers ────────────────────────────────────────────────────

    @staticmethod
    async def _require(store: DataStore, entity: Entity, record_id: int, resource: str) -> Record:
        record = await store.find_one(entity, {"id": record_id})
        if record is None:
            raise NotFoundError(resource=resource, resource_id=record_id)
        return record

    @staticmethod
    async def _insert_with_attachment(
        store: DataStore,
        files: FileService,
        entity: Entity,
        fields: Dict[str, Any],
        attachment: Optional[Upload],
    ) -> Any:
        stored_name = None
        if attachment is not None:
            stored_name = await files.store_attachment(attachment.filename, attachment.content)
        try:
            return await store.insert(entity, {**fields, "file_path": stored_name})
        except Exception:
            await files.cleanup_file(stored_name)
            raise

    async def _list(self, store: DataStore, filters: Dict[str, Any]) -> List[DiscussionOut]:
        rows = await store.find_many(
            Entity.DISCUSSION,
            filters,
            order_by="created_at",
            descending=True,
        )
        enriched = await aggregation_service.enrich_with_author(store, rows)
        return [DiscussionOut(**row) for row in enriched]

    # ── Create ────────────────────────────────────────────────────────────

    async def create(
        self,
        store: DataStore,
        files: FileService,
        user_id: Optional[int],
        content: Optional[str],
        batch: Optional[str] = None,
        department: Optional[str] = None,
        is_public: bool = False,
        attachment: Optional[Upload] = None,
    ) -> CreatedResponse:
        """
        Create a class-scoped, department-scoped, or public discussion.

        The shape follows from the fields: is_public marks a public post,
        otherwise batch/department set the audience.
        """
        if user_id is None or not (content or "").strip():
            raise ValidationError(message="Missing user_id or content", field="content")

        await self._require(store, Entity.USER, user_id, "user")

        discussion_id = await self._insert_with_attachment(
            store,
            files,
            Entity.DISCUSSION,
            {
                "user_id": user_id,
                "batch": _blank_to_none(batch),
                "department": _blank_to_none(department),
                "content": content,
                "is_public": is_public,
                "created_at": utcnow(),
            },
            attachment,
        )
        logger.info("Discussion %s created by user %s (public=%s)", discussion_id, user_id, is_public)
        return CreatedResponse(success=True, id=discussion_id)

    async def create_department(
        self,
        store: DataStore,
        files: FileService,
        user_id: Optional[int],
        department: Optional[str],
        content: Optional[str],
        attachment: Optional[Upload] = None,
    ) -> CreatedResponse:
        """Department-scoped post: batch is forced to NULL and the post is never public."""
        if user_id is None or not _blank_to_none(department) or not (content or "").strip():
            raise ValidationError(message="Missing required fields", field="department")

        return await self.create(
            store,
            files,
            user_id=user_id,
            content=content,
            batch=None,
            department=department,
            is_public=False,
            attachment=attachment,
        )

    # ── List ──────────────────────────────────────────────────────────────

    async def list_class(
        self,
        store: DataStore,
        batch: Optional[str],
        department: Optional[str],
    ) -> List[DiscussionOut]:
        batch, department = _blank_to_none(batch), _blank_to_none(department)
        if batch is None or department is None:
            raise ValidationError(message="Missing batch or department", field="batch")
        return await self._list(
            store,
            {"batch": batch, "department": department, "is_public": False},
        )

    async def list_department(self, store: DataStore, department: str) -> List[DiscussionOut]:
        return await self._list(
            store,
            {"department": department, "batch": None, "is_public": False},
        )

    async def list_public(self, store: DataStore) -> List[DiscussionOut]:
        return await self._list(store, {"is_public": True})

    # ── Likes ─────────────────────────────────────────────────────────────

    async def like(self, store: DataStore, post_id: int, user_id: Optional[int]) -> SuccessResponse:
        """Idempotent: liking twice leaves one like and still reports success."""
        if user_id is None:
            raise ValidationError(message="Missing user_id", field="user_id")

        await self._require(store, Entity.DISCUSSION, post_id, "discussion")
        await self._require(store, Entity.USER, user_id, "user")

        await aggregation_service.like(store, post_id, user_id)
        return SuccessResponse(success=True)

    async def like_count(self, store: DataStore, post_id: int) -> LikeCountResponse:
        return LikeCountResponse(total=await aggregation_service.like_count(store, post_id))

    # ── Replies ───────────────────────────────────────────────────────────

    async def reply(
        self,
        store: DataStore,
        files: FileService,
        post_id: int,
        user_id: Optional[int],
        content: Optional[str],
        attachment: Optional[Upload] = None,
    ) -> SuccessResponse:
        if user_id is None or not (content or "").strip():
            raise ValidationError(message="Missing user_id or content", field="content")

        await self._require(store, Entity.DISCUSSION, post_id, "discussion")
        await self._require(store, Entity.USER, user_id, "user")

        reply_id = await self._insert_with_attachment(
            store,
            files,
            Entity.POST_REPLY,
            {
                "post_id": post_id,
                "user_id": user_id,
                "content": content,
                "created_at": utcnow(),
            },
            attachment,
        )
        logger.info("Reply %s added to discussion %s", reply_id, post_id)
        return SuccessResponse(success=True)

    async def list_replies(self, store: DataStore, post_id: int) -> List[ReplyOut]:
        rows = await store.find_many(
            Entity.POST_REPLY,
            {"post_id": post_id},
            order_by="created_at",
        )
        enriched = await aggregation_service.enrich_with_author(store, rows)
        return [ReplyOut(**row) for row in enriched]


discussion_service = DiscussionService()
