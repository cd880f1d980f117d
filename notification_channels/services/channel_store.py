"""Channel store collaborator interface and implementations.

The channel store is the authoritative registry of channels and groups.
The builder and reconciler only talk to it through the ChannelStore
protocol, so the persistent SQL store and the in-memory store are
interchangeable.

Store Contract:
    - Every call is synchronous and keyed by id.
    - create_or_replace_channel() overwrites every attribute of an existing
      channel with the same id (explicit replace, not a partial update).
    - A channel's group_id must reference a group already in the store.
    - delete_channel() of an unknown id succeeds without effect.
    - Failures surface as ChannelStoreError.

Short Transaction Pattern:
    SqlChannelStore opens one session per call and commits before
    returning, so each store call is atomic on its own and no transaction
    is held across a reconciliation pass.
"""

from typing import Protocol, runtime_checkable

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from notification_channels.exceptions import ChannelStoreError
from notification_channels.models import NotificationChannel, NotificationChannelGroup
from notification_channels.schemas.channel import ChannelGroup, ResolvedChannel

log = structlog.get_logger(__name__)

__all__ = ["ChannelStore", "InMemoryChannelStore", "SqlChannelStore"]


@runtime_checkable
class ChannelStore(Protocol):
    """Operations the builder and reconciler need from a channel store."""

    def create_or_replace_channel(self, channel: ResolvedChannel) -> None: ...

    def create_or_update_group(self, group: ChannelGroup) -> None: ...

    def get_channel(self, channel_id: str) -> ResolvedChannel | None: ...

    def get_group(self, group_id: str) -> ChannelGroup | None: ...

    def list_channel_ids(self) -> set[str]: ...

    def delete_channel(self, channel_id: str) -> None: ...


class InMemoryChannelStore:
    """Dictionary-backed channel store.

    Enforces the same group-reference rule as the SQL store so code
    exercised against it behaves the same against the database.
    """

    def __init__(self) -> None:
        self._channels: dict[str, ResolvedChannel] = {}
        self._groups: dict[str, ChannelGroup] = {}

    def create_or_replace_channel(self, channel: ResolvedChannel) -> None:
        if channel.group_id is not None and channel.group_id not in self._groups:
            raise ChannelStoreError(
                f"group {channel.group_id!r} does not exist",
                operation="create_or_replace_channel",
                channel_id=channel.id,
            )
        self._channels[channel.id] = channel

    def create_or_update_group(self, group: ChannelGroup) -> None:
        self._groups[group.id] = group

    def get_channel(self, channel_id: str) -> ResolvedChannel | None:
        return self._channels.get(channel_id)

    def get_group(self, group_id: str) -> ChannelGroup | None:
        return self._groups.get(group_id)

    def list_channel_ids(self) -> set[str]:
        return set(self._channels)

    def delete_channel(self, channel_id: str) -> None:
        self._channels.pop(channel_id, None)


class SqlChannelStore:
    """Channel store persisted through SQLAlchemy.

    Args:
        session_factory: sessionmaker bound to the channel store engine
            (see notification_channels.database.create_session_factory).

    Example:
        >>> store = SqlChannelStore(create_session_factory("sqlite:///channels.db"))
        >>> store.list_channel_ids()
        {'fcm_fallback_notification_channel', 'OS_news'}
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create_or_replace_channel(self, channel: ResolvedChannel) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(NotificationChannel, channel.id)
                if row is None:
                    row = NotificationChannel(channel_id=channel.id)
                    session.add(row)
                row.apply(channel)
        except SQLAlchemyError as e:
            raise ChannelStoreError(
                str(e),
                operation="create_or_replace_channel",
                channel_id=channel.id,
            ) from e

    def create_or_update_group(self, group: ChannelGroup) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(NotificationChannelGroup, group.id)
                if row is None:
                    session.add(NotificationChannelGroup(group_id=group.id, name=group.name))
                elif row.name != group.name:
                    row.name = group.name
        except SQLAlchemyError as e:
            raise ChannelStoreError(
                str(e),
                operation="create_or_update_group",
                channel_id=group.id,
            ) from e

    def get_channel(self, channel_id: str) -> ResolvedChannel | None:
        try:
            with self._session_factory() as session:
                row = session.get(NotificationChannel, channel_id)
                return row.to_schema() if row is not None else None
        except SQLAlchemyError as e:
            raise ChannelStoreError(
                str(e), operation="get_channel", channel_id=channel_id
            ) from e

    def get_group(self, group_id: str) -> ChannelGroup | None:
        try:
            with self._session_factory() as session:
                row = session.get(NotificationChannelGroup, group_id)
                return row.to_schema() if row is not None else None
        except SQLAlchemyError as e:
            raise ChannelStoreError(
                str(e), operation="get_group", channel_id=group_id
            ) from e

    def list_channel_ids(self) -> set[str]:
        try:
            with self._session_factory() as session:
                result = session.execute(select(NotificationChannel.channel_id))
                return set(result.scalars().all())
        except SQLAlchemyError as e:
            raise ChannelStoreError(str(e), operation="list_channel_ids") from e

    def delete_channel(self, channel_id: str) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(NotificationChannel, channel_id)
                if row is None:
                    log.debug("channel_already_absent", channel_id=channel_id)
                    return
                session.delete(row)
        except SQLAlchemyError as e:
            raise ChannelStoreError(
                str(e), operation="delete_channel", channel_id=channel_id
            ) from e
