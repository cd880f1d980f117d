"""Tests for the channel store implementations.

Contract tests run against both InMemoryChannelStore and SqlChannelStore
through the parametrized any_store fixture.
"""

import pytest
from sqlalchemy.exc import OperationalError

from notification_channels.exceptions import ChannelStoreError
from notification_channels.schemas.channel import ChannelGroup, ResolvedChannel
from notification_channels.services.channel_store import (
    ChannelStore,
    InMemoryChannelStore,
    SqlChannelStore,
)
from tests.support.factories import create_external_channel


class TestStoreContract:
    """Behaviour every ChannelStore must share."""

    def test_p0_implements_protocol(self, any_store):
        """[P0] Both stores satisfy the ChannelStore protocol."""
        assert isinstance(any_store, ChannelStore)

    def test_p0_create_then_get(self, any_store):
        """[P0] A written channel reads back unchanged.

        GIVEN: An empty store
        WHEN: Writing a channel with a vibration pattern and no sound
        THEN: get_channel returns an equal ResolvedChannel
        """
        # GIVEN
        channel = ResolvedChannel(
            id="OS_a",
            name="Alerts",
            description="Urgent things",
            importance=4,
            light_color=-65536,
            vibration_pattern=(0, 250, 250, 250),
            sound=None,
            lockscreen_visibility=-1,
            bypass_dnd=True,
        )

        # WHEN
        any_store.create_or_replace_channel(channel)

        # THEN
        assert any_store.get_channel("OS_a") == channel
        assert any_store.list_channel_ids() == {"OS_a"}

    def test_p0_replace_overwrites_every_attribute(self, any_store):
        """[P0] create_or_replace is a full replace, not a partial update."""
        any_store.create_or_replace_channel(
            create_external_channel("OS_a", importance=5, description="old", bypass_dnd=True)
        )
        replacement = create_external_channel("OS_a", name="renamed", importance=2)

        any_store.create_or_replace_channel(replacement)

        stored = any_store.get_channel("OS_a")
        assert stored == replacement
        assert stored.description is None
        assert stored.bypass_dnd is False

    def test_p0_silent_channel_stays_silent(self, any_store):
        """[P0] A channel without sound reads back without sound.

        GIVEN: An empty store
        WHEN: Writing a silent channel, replacing it with an audible one,
              then replacing it with a silent one again
        THEN: Each read returns exactly the sound that was written
        """
        # WHEN / THEN: insert silent
        any_store.create_or_replace_channel(create_external_channel("OS_b", sound=None))
        assert any_store.get_channel("OS_b").sound is None

        # WHEN / THEN: replace audible
        any_store.create_or_replace_channel(create_external_channel("OS_b"))
        assert any_store.get_channel("OS_b").sound is not None

        # WHEN / THEN: replace silent again
        any_store.create_or_replace_channel(create_external_channel("OS_b", sound=None))
        assert any_store.get_channel("OS_b").sound is None

    def test_p1_missing_ids_return_none(self, any_store):
        """[P1] Unknown channel and group ids read as None."""
        assert any_store.get_channel("missing") is None
        assert any_store.get_group("missing") is None

    def test_p1_group_create_and_rename(self, any_store):
        """[P1] create_or_update_group inserts, then renames."""
        any_store.create_or_update_group(ChannelGroup(id="OS_g", name="Old"))
        any_store.create_or_update_group(ChannelGroup(id="OS_g", name="New"))

        assert any_store.get_group("OS_g") == ChannelGroup(id="OS_g", name="New")

    def test_p0_channel_requires_existing_group(self, any_store):
        """[P0] A channel cannot reference a group that was never written.

        GIVEN: An empty store
        WHEN: Writing a channel whose group_id is unknown
        THEN: ChannelStoreError is raised and nothing is stored
        """
        with pytest.raises(ChannelStoreError) as exc_info:
            any_store.create_or_replace_channel(
                create_external_channel("OS_a", group_id="OS_missing")
            )

        assert exc_info.value.operation == "create_or_replace_channel"
        assert exc_info.value.channel_id == "OS_a"
        assert any_store.get_channel("OS_a") is None

    def test_p1_channel_with_group(self, any_store):
        """[P1] Writing the group first makes the reference valid."""
        any_store.create_or_update_group(ChannelGroup(id="OS_g", name="Group"))

        any_store.create_or_replace_channel(create_external_channel("OS_a", group_id="OS_g"))

        assert any_store.get_channel("OS_a").group_id == "OS_g"

    def test_p0_delete_removes_channel(self, any_store):
        """[P0] delete_channel removes only the named channel."""
        any_store.create_or_replace_channel(create_external_channel("OS_a"))
        any_store.create_or_replace_channel(create_external_channel("OS_b"))

        any_store.delete_channel("OS_a")

        assert any_store.list_channel_ids() == {"OS_b"}

    def test_p1_delete_missing_is_noop(self, any_store):
        """[P1] Deleting an unknown id succeeds without effect."""
        any_store.create_or_replace_channel(create_external_channel("OS_a"))

        any_store.delete_channel("never_existed")
        any_store.delete_channel("never_existed")

        assert any_store.list_channel_ids() == {"OS_a"}

    def test_p2_delete_keeps_group(self, any_store):
        """[P2] Deleting a channel leaves its group in place."""
        any_store.create_or_update_group(ChannelGroup(id="OS_g", name="Group"))
        any_store.create_or_replace_channel(create_external_channel("OS_a", group_id="OS_g"))

        any_store.delete_channel("OS_a")

        assert any_store.get_group("OS_g") is not None


class TestSqlChannelStore:
    """Tests specific to the SQLAlchemy-backed store."""

    def test_p1_persists_across_store_instances(self, sql_session_factory):
        """[P1] A second store over the same database sees earlier writes."""
        SqlChannelStore(sql_session_factory).create_or_replace_channel(
            create_external_channel("OS_a", vibration_pattern=(1, 2, 3, 4))
        )

        reopened = SqlChannelStore(sql_session_factory)

        assert reopened.get_channel("OS_a").vibration_pattern == (1, 2, 3, 4)

    def test_p1_database_errors_wrapped(self, sql_store, mocker):
        """[P1] SQLAlchemy errors surface as ChannelStoreError.

        GIVEN: A session factory whose sessions fail on first use
        WHEN: Listing channel ids
        THEN: ChannelStoreError with operation list_channel_ids is raised
        """
        # GIVEN
        failing_session = mocker.MagicMock()
        failing_session.__enter__.return_value.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("database is locked")
        )
        mocker.patch.object(sql_store, "_session_factory", return_value=failing_session)

        # WHEN / THEN
        with pytest.raises(ChannelStoreError) as exc_info:
            sql_store.list_channel_ids()

        assert exc_info.value.operation == "list_channel_ids"
        assert "database is locked" in str(exc_info.value)

    def test_p2_write_errors_wrapped(self, sql_store, mocker):
        """[P2] Failures inside a write transaction carry the channel id."""
        failing_begin = mocker.MagicMock()
        failing_begin.__enter__.side_effect = OperationalError(
            "BEGIN", {}, Exception("disk I/O error")
        )
        factory = mocker.MagicMock()
        factory.begin.return_value = failing_begin
        mocker.patch.object(sql_store, "_session_factory", factory)

        with pytest.raises(ChannelStoreError) as exc_info:
            sql_store.delete_channel("OS_a")

        assert exc_info.value.operation == "delete_channel"
        assert exc_info.value.channel_id == "OS_a"


class TestInMemoryChannelStore:
    """Tests specific to the in-memory store."""

    def test_p2_stores_are_independent(self):
        """[P2] Separate instances do not share state."""
        first = InMemoryChannelStore()
        second = InMemoryChannelStore()

        first.create_or_replace_channel(create_external_channel("OS_a"))

        assert second.list_channel_ids() == set()
