"""settings, newsletters and post reports

Revision ID: 8d41b7e0c2a6
Revises: 3c9a1f52d7e4
Create Date: 2026-10-26 14:03:17.552901

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d41b7e0c2a6"
down_revision: Union[str, Sequence[str], None] = "3c9a1f52d7e4"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Add per-user settings, newsletter preferences and post reports."""
    op.create_table(
        "user_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.String(length=120), nullable=True),
        sa.Column("visibility", sa.String(length=16), nullable=False),
        sa.Column("send_emails", sa.Boolean(), nullable=False),
        sa.Column("comment_setting", sa.String(length=32), nullable=False),
        sa.Column("signature", sa.Text(), nullable=False),
        sa.Column("auto_save", sa.Boolean(), nullable=False),
        sa.Column("analytics_id", sa.String(length=64), nullable=False),
        sa.Column("digest_frequency", sa.String(length=16), nullable=False),
        sa.Column("membership", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "visibility IN ('Public', 'Unlisted', 'Private')",
            name="ck_user_settings_visibility",
        ),
        sa.CheckConstraint(
            "comment_setting IN ('Everyone', 'Followers only', 'Disabled')",
            name="ck_user_settings_comment_setting",
        ),
        sa.CheckConstraint(
            "digest_frequency IN ('Daily', 'Weekly', 'Monthly')",
            name="ck_user_settings_digest_frequency",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "newsletters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("subscribers_count", sa.Integer(), nullable=False),
        sa.Column("is_subscribed", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "post_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=120), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "user_id", name="uq_post_report"),
    )
    op.create_index("ix_post_reports_post_id", "post_reports", ["post_id"])
    op.create_index("ix_post_reports_user_id", "post_reports", ["user_id"])


def downgrade() -> None:
    """Drop the tables added by this revision."""
    op.drop_index("ix_post_reports_user_id", table_name="post_reports")
    op.drop_index("ix_post_reports_post_id", table_name="post_reports")
    for table in ("post_reports", "newsletters", "user_settings"):
        op.drop_table(table)
