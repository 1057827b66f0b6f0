"""
MindEase Backend — API Endpoint Tests
=======================================

What:  End-to-end requests through create_app() on a SQLite database.
How:   HTTPX AsyncClient over ASGITransport; fixtures seed rows directly
       through the store where the API has no write path (friend relations).

What we test:
    ✅ Register/login flows, duplicate email, generic login failure
    ✅ Chats: ascending order, 404 for unknown user, presence checks
    ✅ Discussions: three disjoint visibility lists, attachments
    ✅ Likes: idempotent, counted once
    ✅ Replies: ascending, 404 for unknown discussion
    ✅ Profile: friend summary, full-overwrite PUT, avatar upload + serving
    ✅ Error body shape, request IDs, 400 for malformed input and out-of-range ids
    ✅ Long free-text fields stored whole, overlong email rejected
"""

import pytest

from mindease.storage.base import Entity

REGISTER_BODY = {
    "name": "A",
    "email": "a@x.com",
    "password": "p1",
    "department": "CS",
    "batch": "2025",
}


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_then_duplicate_email(self, test_client):
        first = await test_client.post("/auth/register", json=REGISTER_BODY)
        second = await test_client.post(
            "/auth/register", json={**REGISTER_BODY, "name": "Different"}
        )

        assert first.status_code == 201
        assert first.json() == {"message": "Registered successfully"}
        assert second.status_code == 400
        assert second.json()["message"] == "Email already exists"
        assert second.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_register_missing_field(self, test_client):
        body = {k: v for k, v in REGISTER_BODY.items() if k != "batch"}

        response = await test_client.post("/auth/register", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required"

    @pytest.mark.asyncio
    async def test_register_login_round_trip(self, test_client):
        await test_client.post("/auth/register", json=REGISTER_BODY)

        response = await test_client.post(
            "/auth/login", json={"email": "a@x.com", "password": "p1"}
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert isinstance(user["id"], int)
        assert {k: user[k] for k in ("name", "email", "batch", "department")} == {
            "name": "A",
            "email": "a@x.com",
            "batch": "2025",
            "department": "CS",
        }
        assert "password" not in user

    @pytest.mark.asyncio
    async def test_long_free_text_fields_are_stored_whole(self, test_client):
        body = {
            **REGISTER_BODY,
            "name": "N" * 150,
            "department": "Computer Science and Engineering (Artificial Intelligence and Data Science)",
            "batch": "2021-2025 Evening Section B",
        }

        registered = await test_client.post("/auth/register", json=body)
        login = await test_client.post(
            "/auth/login", json={"email": "a@x.com", "password": "p1"}
        )

        assert registered.status_code == 201
        user = login.json()["user"]
        assert user["name"] == body["name"]
        assert user["department"] == body["department"]
        assert user["batch"] == body["batch"]

    @pytest.mark.asyncio
    async def test_overlong_email_is_400(self, test_client):
        body = {**REGISTER_BODY, "email": "a" * 250 + "@x.com"}

        response = await test_client.post("/auth/register", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_login_failures_share_message(self, test_client):
        await test_client.post("/auth/register", json=REGISTER_BODY)

        wrong_password = await test_client.post(
            "/auth/login", json={"email": "a@x.com", "password": "wrong"}
        )
        unknown_email = await test_client.post(
            "/auth/login", json={"email": "nobody@x.com", "password": "p1"}
        )

        assert wrong_password.status_code == 400
        assert unknown_email.status_code == 400
        assert wrong_password.json()["message"] == unknown_email.json()["message"]


class TestChatEndpoints:

    @pytest.mark.asyncio
    async def test_messages_listed_oldest_first_with_name(self, test_client, make_user):
        user_id = await make_user(name="Asha")
        for text in ("first", "second", "third"):
            response = await test_client.post("/chats", json={"userId": user_id, "content": text})
            assert response.status_code == 201
            assert response.json() == {"message": "Message added successfully"}

        response = await test_client.get(f"/chats/{user_id}")

        assert response.status_code == 200
        messages = response.json()
        assert [m["content"] for m in messages] == ["first", "second", "third"]
        assert {m["name"] for m in messages} == {"Asha"}
        assert [m["created_at"] for m in messages] == sorted(m["created_at"] for m in messages)

    @pytest.mark.asyncio
    async def test_unknown_user_is_404(self, test_client):
        response = await test_client.get("/chats/9999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_existing_user_without_messages_is_empty(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.get(f"/chats/{user_id}")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post("/chats", json={"userId": user_id, "content": "  "})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing fields"


class TestDiscussionEndpoints:

    @pytest.mark.asyncio
    async def test_visibility_lists_are_disjoint(self, test_client, make_user):
        user_id = await make_user(name="Asha")
        class_post = await test_client.post(
            "/discussions",
            data={"user_id": str(user_id), "content": "class", "batch": "2025", "department": "CS"},
        )
        dept_post = await test_client.post(
            "/discussions/department",
            data={"user_id": str(user_id), "content": "dept", "department": "CS"},
        )
        public_post = await test_client.post(
            "/discussions",
            data={"user_id": str(user_id), "content": "public", "is_public": "true"},
        )
        assert class_post.status_code == 200
        assert dept_post.status_code == 200
        assert public_post.status_code == 200
        assert class_post.json()["success"] is True

        class_list = (await test_client.get("/discussions", params={"batch": "2025", "department": "CS"})).json()
        dept_list = (await test_client.get("/discussions/department/CS")).json()
        public_list = (await test_client.get("/discussions/public/all")).json()

        assert [d["content"] for d in class_list] == ["class"]
        assert [d["content"] for d in dept_list] == ["dept"]
        assert [d["content"] for d in public_list] == ["public"]
        assert class_list[0]["name"] == "Asha"
        assert class_list[0]["id"] == class_post.json()["id"]
        assert public_list[0]["is_public"] is True

    @pytest.mark.asyncio
    async def test_lists_are_newest_first(self, test_client, make_user):
        user_id = await make_user()
        for text in ("old", "middle", "new"):
            await test_client.post(
                "/discussions",
                data={"user_id": str(user_id), "content": text, "is_public": "1"},
            )

        response = await test_client.get("/discussions/public/all")

        assert [d["content"] for d in response.json()] == ["new", "middle", "old"]

    @pytest.mark.asyncio
    async def test_class_list_requires_batch_and_department(self, test_client):
        response = await test_client.get("/discussions", params={"batch": "2025"})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing batch or department"

    @pytest.mark.asyncio
    async def test_create_requires_content(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post("/discussions", data={"user_id": str(user_id)})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_for_unknown_user_is_404(self, test_client):
        response = await test_client.post(
            "/discussions", data={"user_id": "9999", "content": "hi", "is_public": "true"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_attachment_stored_and_served(self, test_client, make_user):
        user_id = await make_user()

        created = await test_client.post(
            "/discussions",
            data={"user_id": str(user_id), "content": "see attached", "is_public": "true"},
            files={"file": ("notes.pdf", b"%PDF-1.4 notes", "application/pdf")},
        )
        assert created.status_code == 200

        post = (await test_client.get("/discussions/public/all")).json()[0]
        assert post["file_path"].endswith(".pdf")

        served = await test_client.get(f"/uploads/{post['file_path']}")
        assert served.status_code == 200
        assert served.content == b"%PDF-1.4 notes"

    @pytest.mark.asyncio
    async def test_missing_upload_is_404(self, test_client):
        response = await test_client.get("/uploads/does-not-exist.png")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_orphaned_author_fails_whole_list(self, test_client, store, make_user):
        user_id = await make_user()
        await store.insert(Entity.DISCUSSION, {"user_id": user_id, "content": "ok", "is_public": True})
        # SQLite does not enforce foreign keys by default
        await store.insert(Entity.DISCUSSION, {"user_id": 4040, "content": "orphan", "is_public": True})

        response = await test_client.get("/discussions/public/all")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "4040" not in response.text


class TestLikeEndpoints:

    @pytest.mark.asyncio
    async def test_double_like_counts_once(self, test_client, store, make_user):
        user_id = await make_user()
        post_id = await store.insert(Entity.DISCUSSION, {"user_id": user_id, "content": "post"})

        first = await test_client.post(f"/discussions/{post_id}/like", json={"user_id": user_id})
        second = await test_client.post(f"/discussions/{post_id}/like", json={"user_id": user_id})
        likes = await test_client.get(f"/discussions/{post_id}/likes")

        assert first.status_code == 200
        assert first.json() == {"success": True}
        assert second.status_code == 200
        assert second.json() == {"success": True}
        assert likes.json() == {"total": 1}

    @pytest.mark.asyncio
    async def test_like_requires_user_id(self, test_client, store, make_user):
        user_id = await make_user()
        post_id = await store.insert(Entity.DISCUSSION, {"user_id": user_id, "content": "post"})

        response = await test_client.post(f"/discussions/{post_id}/like", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing user_id"

    @pytest.mark.asyncio
    async def test_like_unknown_discussion_is_404(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post("/discussions/9999/like", json={"user_id": user_id})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_likes_of_unliked_post_is_zero(self, test_client):
        response = await test_client.get("/discussions/9999/likes")

        assert response.json() == {"total": 0}


class TestReplyEndpoints:

    @pytest.mark.asyncio
    async def test_replies_listed_oldest_first(self, test_client, store, make_user):
        author = await make_user(name="Author")
        replier = await make_user(name="Replier")
        post_id = await store.insert(Entity.DISCUSSION, {"user_id": author, "content": "post"})

        for user_id, text in ((replier, "r1"), (author, "r2"), (replier, "r3")):
            response = await test_client.post(
                f"/discussions/{post_id}/reply",
                data={"user_id": str(user_id), "content": text},
            )
            assert response.json() == {"success": True}

        replies = (await test_client.get(f"/discussions/{post_id}/replies")).json()

        assert [(r["content"], r["name"]) for r in replies] == [
            ("r1", "Replier"),
            ("r2", "Author"),
            ("r3", "Replier"),
        ]
        assert all(r["post_id"] == post_id for r in replies)

    @pytest.mark.asyncio
    async def test_reply_to_unknown_discussion_is_404(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post(
            "/discussions/9999/reply", data={"user_id": str(user_id), "content": "hi"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reply_requires_content(self, test_client, store, make_user):
        user_id = await make_user()
        post_id = await store.insert(Entity.DISCUSSION, {"user_id": user_id, "content": "post"})

        response = await test_client.post(
            f"/discussions/{post_id}/reply", data={"user_id": str(user_id)}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Missing user_id or content"


class TestProfileEndpoints:

    @pytest.mark.asyncio
    async def test_profile_friend_summary(self, test_client, store, make_user):
        me = await make_user(id=42, name="Forty Two")
        a = await make_user(name="A")
        b = await make_user(name="B")
        requester = await make_user(name="Requester")
        await store.insert(Entity.FRIEND, {"user_id": me, "friend_id": a, "status": "accepted"})
        await store.insert(Entity.FRIEND, {"user_id": b, "friend_id": me, "status": "accepted"})
        request_id = await store.insert(
            Entity.FRIEND, {"user_id": requester, "friend_id": me, "status": "pending"}
        )

        response = await test_client.get("/profile/42")

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == 42
        assert body["user"]["name"] == "Forty Two"
        assert "password" not in body["user"]
        assert body["friendsCount"] == 2
        assert body["pendingRequests"] == [
            {
                "request_id": request_id,
                "requester_id": requester,
                "requester_name": "Requester",
                "avatar_url": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_unknown_profile_is_404(self, test_client):
        response = await test_client.get("/profile/9999")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_overwrites_absent_fields_with_null(self, test_client, make_user):
        user_id = await make_user()
        await test_client.put(
            "/profile",
            json={"userId": user_id, "name": "Asha", "nickname": "ash", "bio": "hello"},
        )

        response = await test_client.put("/profile", json={"userId": user_id, "name": "Asha K"})
        profile = (await test_client.get(f"/profile/{user_id}")).json()["user"]

        assert response.status_code == 200
        assert response.json() == {"message": "Profile updated"}
        assert profile["name"] == "Asha K"
        assert profile["nickname"] is None
        assert profile["bio"] is None

    @pytest.mark.asyncio
    async def test_update_requires_user_id(self, test_client):
        response = await test_client.put("/profile", json={"name": "x"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_unknown_user_is_404(self, test_client):
        response = await test_client.put("/profile", json={"userId": 9999, "name": "x"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_avatar_upload_and_serve(self, test_client, make_user):
        user_id = await make_user()
        image = b"\x89PNG\r\n\x1a\n fake image"

        response = await test_client.post(
            "/profile/upload",
            data={"userId": str(user_id)},
            files={"avatar": ("me.png", image, "image/png")},
        )

        assert response.status_code == 200
        avatar_url = response.json()["avatarUrl"]
        assert avatar_url.startswith(f"/uploads/avatar_{user_id}_")
        assert avatar_url.endswith(".png")

        profile = (await test_client.get(f"/profile/{user_id}")).json()["user"]
        assert profile["avatar_url"] == avatar_url

        served = await test_client.get(avatar_url)
        assert served.status_code == 200
        assert served.content == image

    @pytest.mark.asyncio
    async def test_avatar_upload_requires_file(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post("/profile/upload", data={"userId": str(user_id)})

        assert response.status_code == 400
        assert response.json()["message"] == "Missing userId or file"

    @pytest.mark.asyncio
    async def test_avatar_upload_rejects_non_image(self, test_client, make_user):
        user_id = await make_user()

        response = await test_client.post(
            "/profile/upload",
            data={"userId": str(user_id)},
            files={"avatar": ("script.sh", b"#!/bin/sh", "text/x-shellscript")},
        )

        assert response.status_code == 400


class TestGateway:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_400(self, test_client):
        response = await test_client.get("/chats/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_request_id_echoed_in_header_and_error_body(self, test_client):
        response = await test_client.get("/profile/9999", headers={"X-Request-ID": "trace123"})

        assert response.headers["X-Request-ID"] == "trace123"
        assert response.json()["request_id"] == "trace123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "/chats/99999999999999999999",
            "/profile/3000000000",
            "/discussions/3000000000/likes",
            "/discussions/3000000000/replies",
            "/chats/0",
        ],
    )
    async def test_out_of_range_path_id_is_400(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_out_of_range_body_id_is_400(self, test_client, make_user):
        user_id = await make_user()

        chat = await test_client.post("/chats", json={"userId": 3000000000, "content": "x"})
        like = await test_client.post("/discussions/1/like", json={"user_id": 0})
        profile = await test_client.put("/profile", json={"userId": 10**20, "name": "A"})
        post = await test_client.post(
            "/discussions", data={"user_id": "3000000000", "content": "x"}
        )

        for response in (chat, like, profile, post):
            assert response.status_code == 400
            assert response.json()["error"] == "validation_error"
        assert (await test_client.get(f"/chats/{user_id}")).json() == []
