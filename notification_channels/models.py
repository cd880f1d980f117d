"""SQLAlchemy 2.0 ORM models.

This module contains the persistent form of the device-local channel
registry. All models use the Mapped[type] annotation pattern required by
SQLAlchemy 2.0.

Tables:
    notification_channel_groups: One row per ChannelGroup.
    notification_channels: One row per ResolvedChannel; group_id references
        notification_channel_groups so a channel can only point at a group
        that was written first.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from notification_channels.schemas.channel import ChannelGroup, ResolvedChannel


def utcnow() -> datetime:
    """Get current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class NotificationChannelGroup(Base):
    """Persisted channel group.

    Groups are created or renamed by the channel builder and never deleted
    by this system.

    Attributes:
        group_id: Group identifier (primary key).
        name: Display name.
        created_at: Timestamp when the group was first written.
        updated_at: Timestamp of the last rename.
    """

    __tablename__ = "notification_channel_groups"

    group_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    channels: Mapped[list["NotificationChannel"]] = relationship(
        back_populates="group",
    )

    def to_schema(self) -> ChannelGroup:
        return ChannelGroup(id=self.group_id, name=self.name)

    def __repr__(self) -> str:
        return f"<NotificationChannelGroup(group_id={self.group_id!r}, name={self.name!r})>"


class NotificationChannel(Base):
    """Persisted notification channel.

    Column values mirror ResolvedChannel one-to-one. The vibration pattern
    is stored as a JSON array of millisecond durations.

    Attributes:
        channel_id: Channel identifier (primary key, immutable).
        group_id: Owning group, or NULL.
        created_at: Timestamp of (re)creation.
        updated_at: Timestamp of the last replace.
    """

    __tablename__ = "notification_channels"

    channel_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    # no Python-side defaults: apply() writes every column, None included
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    importance: Mapped[int] = mapped_column(Integer, nullable=False)
    show_lights: Mapped[bool] = mapped_column(Boolean, nullable=False)
    light_color: Mapped[int] = mapped_column(Integer, nullable=False)
    vibrate: Mapped[bool] = mapped_column(Boolean, nullable=False)
    vibration_pattern: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    sound: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    lockscreen_visibility: Mapped[int] = mapped_column(Integer, nullable=False)
    show_badge: Mapped[bool] = mapped_column(Boolean, nullable=False)
    bypass_dnd: Mapped[bool] = mapped_column(Boolean, nullable=False)
    group_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("notification_channel_groups.group_id"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    group: Mapped[NotificationChannelGroup | None] = relationship(
        back_populates="channels",
    )

    def apply(self, channel: ResolvedChannel) -> None:
        """Copy every attribute of a resolved channel onto this row."""
        self.name = channel.name
        self.description = channel.description
        self.importance = channel.importance
        self.show_lights = channel.show_lights
        self.light_color = channel.light_color
        self.vibrate = channel.vibrate
        self.vibration_pattern = (
            list(channel.vibration_pattern)
            if channel.vibration_pattern is not None
            else None
        )
        self.sound = channel.sound
        self.lockscreen_visibility = channel.lockscreen_visibility
        self.show_badge = channel.show_badge
        self.bypass_dnd = channel.bypass_dnd
        self.group_id = channel.group_id

    def to_schema(self) -> ResolvedChannel:
        return ResolvedChannel(
            id=self.channel_id,
            name=self.name,
            description=self.description,
            importance=self.importance,
            show_lights=self.show_lights,
            light_color=self.light_color,
            vibrate=self.vibrate,
            vibration_pattern=(
                tuple(self.vibration_pattern)
                if self.vibration_pattern is not None
                else None
            ),
            sound=self.sound,
            lockscreen_visibility=self.lockscreen_visibility,
            show_badge=self.show_badge,
            bypass_dnd=self.bypass_dnd,
            group_id=self.group_id,
        )

    def __repr__(self) -> str:
        return (
            f"<NotificationChannel(channel_id={self.channel_id!r}, "
            f"importance={self.importance}, group_id={self.group_id!r})>"
        )
