"""initial schema: briefs, subscribers, users, roles, audit events

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op
from app.models.base import StringUUID

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _json() -> sa.types.TypeEngine:
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", StringUUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("id", StringUUID(), nullable=False),
        sa.Column("user_id", StringUUID(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index(op.f("ix_user_roles_user_id"), "user_roles", ["user_id"])

    op.create_table(
        "briefs",
        sa.Column("id", StringUUID(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("deep_dive_text", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("fun_fact", sa.Text(), nullable=True),
        sa.Column("radar_points", _json(), nullable=False),
        sa.Column("jargon_term", sa.String(length=255), nullable=True),
        sa.Column("jargon_def", sa.Text(), nullable=True),
        sa.Column("social_caption", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.String(length=2048), nullable=True),
        sa.Column("audio_summary_url", sa.String(length=2048), nullable=True),
        sa.Column(
            "status",
            sa.Enum("draft", "active", name="brief_status", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("publish_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("author_id", StringUUID(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_briefs_single_active",
        "briefs",
        ["status"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )
    op.create_index("ix_briefs_status_publish_date", "briefs", ["status", "publish_date"])

    op.create_table(
        "subscribers",
        sa.Column("id", StringUUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("consent", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subscribers_email"), "subscribers", ["email"], unique=True)

    op.create_table(
        "admin_audit_events",
        sa.Column("id", StringUUID(), nullable=False),
        sa.Column("user_id", StringUUID(), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("target_type", sa.String(length=50), nullable=True),
        sa.Column("target_id", sa.String(length=64), nullable=True),
        sa.Column("details", _json(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admin_audit_events_user_id"), "admin_audit_events", ["user_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_admin_audit_events_user_id"), table_name="admin_audit_events")
    op.drop_table("admin_audit_events")
    op.drop_index(op.f("ix_subscribers_email"), table_name="subscribers")
    op.drop_table("subscribers")
    op.drop_index("ix_briefs_status_publish_date", table_name="briefs")
    op.drop_index("uq_briefs_single_active", table_name="briefs")
    op.drop_table("briefs")
    op.drop_index(op.f("ix_user_roles_user_id"), table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
