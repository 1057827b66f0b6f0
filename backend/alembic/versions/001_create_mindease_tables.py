"""Create MindEase tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, chats, discussions, post_likes, post_replies, friends.
How:   Portable column types only, so the same revision runs on PostgreSQL,
       MySQL, and SQLite.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.Column("department", sa.Text(), nullable=True),
        sa.Column("batch", sa.Text(), nullable=True),
        sa.Column("nickname", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(255), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        # Registration relies on this when two requests race on one email
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "chats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_chats_user_created", "chats", ["user_id", "created_at"])

    op.create_table(
        "discussions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("batch", sa.Text(), nullable=True),
        sa.Column("department", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("file_path", sa.String(255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "idx_discussions_scope",
        "discussions",
        ["department", "batch", "created_at"],
        mysql_length={"department": 100, "batch": 20},
    )
    op.create_index("idx_discussions_public", "discussions", ["is_public", "created_at"])

    # Composite primary key: the idempotent like inserts with ON CONFLICT DO NOTHING
    op.create_table(
        "post_likes",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("post_id", "user_id"),
        sa.ForeignKeyConstraint(["post_id"], ["discussions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )

    op.create_table(
        "post_replies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("file_path", sa.String(255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["discussions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "idx_post_replies_post_created",
        "post_replies",
        ["post_id", "created_at"],
    )

    op.create_table(
        "friends",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("friend_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["friend_id"], ["users.id"]),
        sa.CheckConstraint("user_id <> friend_id", name="ck_friends_not_self"),
        sa.CheckConstraint("status IN ('pending', 'accepted')", name="ck_friends_status"),
    )
    op.create_index("idx_friends_user_status", "friends", ["user_id", "status"])
    op.create_index("idx_friends_friend_status", "friends", ["friend_id", "status"])


def downgrade() -> None:
    op.drop_index("idx_friends_friend_status", table_name="friends")
    op.drop_index("idx_friends_user_status", table_name="friends")
    op.drop_table("friends")
    op.drop_index("idx_post_replies_post_created", table_name="post_replies")
    op.drop_table("post_replies")
    op.drop_table("post_likes")
    op.drop_index("idx_discussions_public", table_name="discussions")
    op.drop_index("idx_discussions_scope", table_name="discussions")
    op.drop_table("discussions")
    op.drop_index("idx_chats_user_created", table_name="chats")
    op.drop_table("chats")
    op.drop_table("users")
