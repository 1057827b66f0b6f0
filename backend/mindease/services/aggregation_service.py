"""
MindEase Backend — Aggregation Service (Read-then-Enrich)
===========================================================

What:  Turns raw record lists into the shapes the API promises: author names
       attached to posts/replies/chats, friend counts, pending friend requests,
       like counts, and the idempotent like itself.
How:   Reads a list through the DataStore, then resolves the referenced users
       with a bounded concurrent fan-out.
Who:   Called by the chat, discussion, and profile services.

Fan-out contract:
    ┌──────────────┐   distinct ids   ┌───────────────────────────────┐
    │ find_many()  │ ───────────────▶ │ find_one(users) × N           │
    └──────────────┘                  │ ≤ fanout_concurrency at once  │
                                      │ whole batch ≤ fanout_timeout  │
                                      └───────────────┬───────────────┘
                                                      ▼
                                    all resolved → enriched list
                                    any failure  → DataAccessError,
                                                   pending lookups cancelled

    There is no partial result. A referenced user that does not exist is a
    DataAccessError, never a record with a null name.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from mindease.config import settings
from mindease.exceptions import DataAccessError
from mindease.models import FRIEND_STATUS_ACCEPTED, FRIEND_STATUS_PENDING
from mindease.storage.base import DataStore, Entity, Record

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PendingRequest:
    request_id: int
    requester_id: int
    requester_name: Optional[str]
    avatar_url: Optional[str]


@dataclass
class FriendSummary:
    friends_count: int
    pending_requests: List[PendingRequest] = field(default_factory=list)


class AggregationService:
    """
    Stateless list+join and count views over the DataStore.

    Args:
        max_concurrency: Lookups allowed in flight per fan-out
                         (None = settings.fanout_concurrency)
        timeout: Seconds allowed for a whole fan-out
                 (None = settings.fanout_timeout)
    """

    def __init__(self, max_concurrency: Optional[int] = None, timeout: Optional[float] = None):
        self._max_concurrency = max_concurrency
        self._timeout = timeout

    # ── Fan-out primitive ─────────────────────────────────────────────────

    async def _fan_out(self, calls: Sequence[Callable[[], Awaitable[T]]]) -> List[T]:
        """
        Run zero-argument coroutine factories concurrently, bounded, fail-fast.

        Results come back in the order of `calls`. The first exception is
        re-raised after the remaining tasks are cancelled.
        """
        if not calls:
            return []

        limit = self._max_concurrency or settings.fanout_concurrency
        timeout = self._timeout if self._timeout is not None else settings.fanout_timeout
        semaphore = asyncio.Semaphore(limit)

        async def bounded(call: Callable[[], Awaitable[T]]) -> T:
            async with semaphore:
                return await call()

        tasks = [asyncio.ensure_future(bounded(call)) for call in calls]
        try:
            return list(await asyncio.wait_for(asyncio.gather(*tasks), timeout))
        except asyncio.TimeoutError:
            logger.error("Fan-out of %d lookups exceeded %ss", len(calls), timeout)
            raise DataAccessError(
                context={"error": "fan-out timed out", "lookups": len(calls), "timeout": timeout}
            )
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    # ── User resolution ───────────────────────────────────────────────────

    @staticmethod
    async def _require_user(store: DataStore, user_id: Any) -> Record:
        user = await store.find_one(Entity.USER, {"id": user_id})
        if user is None:
            logger.error("Referenced user %s does not exist", user_id)
            raise DataAccessError(
                message="A referenced user record is missing.",
                context={"user_id": user_id},
            )
        return user

    async def resolve_users(self, store: DataStore, user_ids: Iterable[Any]) -> Dict[Any, Record]:
        """
        Look up each distinct user id once, concurrently.

        Returns:
            Mapping of user id → user record, covering every requested id.

        Raises:
            DataAccessError: a lookup failed or a user does not exist
        """
        distinct = list(dict.fromkeys(user_ids))
        users = await self._fan_out(
            [functools.partial(self._require_user, store, user_id) for user_id in distinct]
        )
        return dict(zip(distinct, users))

    # ── Enrich-with-author ────────────────────────────────────────────────

    async def enrich_with_author(
        self,
        store: DataStore,
        records: Iterable[Record],
        author_field: str = "user_id",
    ) -> List[Record]:
        """
        Attach the author's `name` to every record.

        What:    Returns new dicts (inputs are not mutated) in input order.
        How:     One lookup per distinct author, via resolve_users().

        Raises:
            DataAccessError: any lookup failed; nothing is returned
        """
        records = list(records)
        if not records:
            return []

        users = await self.resolve_users(store, (record[author_field] for record in records))
        return [{**record, "name": users[record[author_field]]["name"]} for record in records]

    # ── Friend summary ────────────────────────────────────────────────────

    async def friend_summary(self, store: DataStore, user_id: int) -> FriendSummary:
        """
        Count accepted friendships and list incoming pending requests.

        friends_count sums two filtered counts (user as requester, user as
        target). A relation never has user_id == friend_id, so no row is
        counted twice.
        """
        as_requester, as_target, pending_rows = await self._fan_out([
            functools.partial(
                store.count,
                Entity.FRIEND,
                {"user_id": user_id, "status": FRIEND_STATUS_ACCEPTED},
            ),
            functools.partial(
                store.count,
                Entity.FRIEND,
                {"friend_id": user_id, "status": FRIEND_STATUS_ACCEPTED},
            ),
            functools.partial(
                store.find_many,
                Entity.FRIEND,
                {"friend_id": user_id, "status": FRIEND_STATUS_PENDING},
                order_by="created_at",
            ),
        ])

        requesters = await self.resolve_users(store, (row["user_id"] for row in pending_rows))
        pending = [
            PendingRequest(
                request_id=row["id"],
                requester_id=row["user_id"],
                requester_name=requesters[row["user_id"]]["name"],
                avatar_url=requesters[row["user_id"]].get("avatar_url"),
            )
            for row in pending_rows
        ]
        return FriendSummary(friends_count=as_requester + as_target, pending_requests=pending)

    # ── Likes ─────────────────────────────────────────────────────────────

    async def like_count(self, store: DataStore, post_id: int) -> int:
        return await store.count(Entity.POST_LIKE, {"post_id": post_id})

    async def like(self, store: DataStore, post_id: int, user_id: int) -> bool:
        """
        Record a like exactly once per (post, user).

        Returns True when this call created the like, False when it already
        existed. Both outcomes are a success for the caller.
        """
        created = await store.insert_ignore(
            Entity.POST_LIKE,
            {"post_id": post_id, "user_id": user_id},
        )
        if not created:
            logger.debug("Like (%s, %s) already recorded", post_id, user_id)
        return created


# ── Singleton Instance ────────────────────────────────────────────────────
aggregation_service = AggregationService()
