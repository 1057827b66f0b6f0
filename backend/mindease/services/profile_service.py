"""
MindEase Backend — Profile Service
====================================

What:  Profile view (user fields + friend summary), full-overwrite profile
       update, and avatar upload.
Who:   Called by the /profile routes.

Update semantics (PUT):
    name, nickname, and bio are always written. A field that is absent or
    blank in the request becomes NULL; nothing is "left unchanged".
"""

import logging

from mindease.exceptions import NotFoundError, ValidationError
from mindease.models import utcnow
from mindease.schemas.common import MessageResponse
from mindease.schemas.profile import (
    AvatarResponse,
    PendingRequestOut,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUser,
)
from mindease.services.aggregation_service import aggregation_service
from mindease.services.file_service import FileService, Upload
from mindease.storage.base import DataStore, Entity

logger = logging.getLogger(__name__)


class ProfileService:

    async def get_profile(self, store: DataStore, user_id: int) -> ProfileResponse:
        """
        Assemble the profile page payload.

        Raises:
            NotFoundError: no such user (→ 404)
            DataAccessError: any lookup in the friend summary failed (→ 500)
        """
        user = await store.find_one(Entity.USER, {"id": user_id})
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        summary = await aggregation_service.friend_summary(store, user_id)

        return ProfileResponse(
            user=ProfileUser(
                id=user["id"],
                name=user["name"],
                email=user["email"],
                nickname=user["nickname"],
                bio=user["bio"],
                avatar_url=user["avatar_url"],
                created_at=user["created_at"],
            ),
            friendsCount=summary.friends_count,
            pendingRequests=[
                PendingRequestOut(
                    request_id=pending.request_id,
                    requester_id=pending.requester_id,
                    requester_name=pending.requester_name,
                    avatar_url=pending.avatar_url,
                )
                for pending in summary.pending_requests
            ],
        )

    async def update_profile(self, store: DataStore, payload: ProfileUpdateRequest) -> MessageResponse:
        if payload.user_id is None:
            raise ValidationError(message="userId required", field="userId")

        affected = await store.update(
            Entity.USER,
            payload.user_id,
            {
                "name": (payload.name or "").strip() or None,
                "nickname": (payload.nickname or "").strip() or None,
                "bio": (payload.bio or "").strip() or None,
                "updated_at": utcnow(),
            },
        )
        if affected == 0:
            raise NotFoundError(resource="user", resource_id=payload.user_id)

        logger.info("Profile %s updated", payload.user_id)
        return MessageResponse(message="Profile updated")

    async def upload_avatar(
        self,
        store: DataStore,
        files: FileService,
        user_id: int,
        avatar: Upload,
    ) -> AvatarResponse:
        """
        Store the avatar image and point the user's avatar_url at it.

        The stored file is removed again if the user row cannot be updated.
        """
        if await store.find_one(Entity.USER, {"id": user_id}) is None:
            raise NotFoundError(resource="user", resource_id=user_id)

        stored_name = await files.store_avatar(user_id, avatar.filename, avatar.content)
        avatar_url = files.public_url(stored_name)
        try:
            affected = await store.update(
                Entity.USER,
                user_id,
                {"avatar_url": avatar_url, "updated_at": utcnow()},
            )
            if affected == 0:
                raise NotFoundError(resource="user", resource_id=user_id)
        except Exception:
            await files.cleanup_file(stored_name)
            raise

        logger.info("Avatar for user %s stored as %s", user_id, stored_name)
        return AvatarResponse(avatarUrl=avatar_url)


profile_service = ProfileService()
