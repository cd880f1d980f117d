"""001 initial notification channel tables

Revision ID: 001_initial_channel_tables
Revises:
Create Date: 2026-10-19

Creates the channel group and channel tables of the device-local channel
registry. Groups are created first because channels reference them.
"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_channel_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create notification_channel_groups and notification_channels tables."""
    op.create_table(
        "notification_channel_groups",
        sa.Column("group_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("group_id"),
    )
    op.create_table(
        "notification_channels",
        sa.Column("channel_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("importance", sa.Integer(), nullable=False),
        sa.Column("show_lights", sa.Boolean(), nullable=False),
        sa.Column("light_color", sa.Integer(), nullable=False),
        sa.Column("vibrate", sa.Boolean(), nullable=False),
        sa.Column("vibration_pattern", sa.JSON(), nullable=True),
        sa.Column("sound", sa.String(1024), nullable=True),
        sa.Column("lockscreen_visibility", sa.Integer(), nullable=False),
        sa.Column("show_badge", sa.Boolean(), nullable=False),
        sa.Column("bypass_dnd", sa.Boolean(), nullable=False),
        sa.Column("group_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("channel_id"),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["notification_channel_groups.group_id"],
            name="fk_notification_channels_group_id",
        ),
    )
    op.create_index(
        "ix_notification_channels_group_id",
        "notification_channels",
        ["group_id"],
    )


def downgrade() -> None:
    """Drop notification channel tables."""
    op.drop_index("ix_notification_channels_group_id", table_name="notification_channels")
    op.drop_table("notification_channels")
    op.drop_table("notification_channel_groups")
