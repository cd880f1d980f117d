"""Tests for the apply-channel-payload command.

This module tests:
- Exit codes for successful and failing runs
- Mode selection (auto, channel, list)
- Persistence into the SQLite channel store
"""

import json
from pathlib import Path

import pytest

from notification_channels.cli import apply_payload, build_parser, main
from notification_channels.constants import FALLBACK_CHANNEL_ID
from notification_channels.database import create_session_factory
from notification_channels.exceptions import ChannelStoreError
from notification_channels.services.channel_store import SqlChannelStore
from tests.support.factories import (
    create_channel_list_payload,
    create_channel_spec,
    create_external_channel,
    create_single_channel_payload,
)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file URL inside the test's temporary directory."""
    return f"sqlite:///{tmp_path / 'channels.db'}"


def write_payload(tmp_path: Path, payload: dict) -> Path:
    payload_file = tmp_path / "payload.json"
    payload_file.write_text(json.dumps(payload))
    return payload_file


class TestBuildParser:
    """Tests for argument parsing."""

    def test_p2_defaults(self):
        """[P2] Mode defaults to auto; database URL to the environment."""
        args = build_parser().parse_args(["payload.json"])

        assert args.payload == Path("payload.json")
        assert args.mode == "auto"
        assert args.database_url is None
        assert args.console_logs is False

    def test_p2_invalid_mode_rejected(self):
        """[P2] Unknown modes exit with a usage error."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["payload.json", "--mode", "sideways"])


class TestMain:
    """Tests for main()."""

    def test_p0_channel_list_applied(self, tmp_path: Path, database_url: str, capsys):
        """[P0] A list payload is reconciled into the database.

        GIVEN: A payload declaring OS_a and OS_b
        WHEN: Running the command against a fresh SQLite file
        THEN: It exits 0 and both channels are persisted
        """
        # GIVEN
        payload_file = write_payload(tmp_path, create_channel_list_payload("OS_a", "OS_b"))

        # WHEN
        exit_code = main([str(payload_file), "--database-url", database_url, "--console-logs"])

        # THEN
        assert exit_code == 0
        store = SqlChannelStore(create_session_factory(database_url))
        assert store.list_channel_ids() == {"OS_a", "OS_b"}
        assert "Kept 2 channel(s)" in capsys.readouterr().out

    def test_p1_single_channel_applied(self, tmp_path: Path, database_url: str, capsys):
        """[P1] A single-channel payload prints the channel in use."""
        payload_file = write_payload(
            tmp_path, create_single_channel_payload(create_channel_spec("OS_a", nm="Alerts"))
        )

        exit_code = main([str(payload_file), "--database-url", database_url])

        assert exit_code == 0
        assert "Channel in use: OS_a" in capsys.readouterr().out

    def test_p1_missing_payload_file(self, tmp_path: Path, database_url: str, capsys):
        """[P1] An unreadable payload exits 1."""
        exit_code = main([str(tmp_path / "missing.json"), "--database-url", database_url])

        assert exit_code == 1
        assert "ERROR" in capsys.readouterr().err

    def test_p1_invalid_defaults_file(
        self, tmp_path: Path, database_url: str, monkeypatch: pytest.MonkeyPatch
    ):
        """[P1] A broken CHANNEL_DEFAULTS_FILE exits 1."""
        monkeypatch.setenv("CHANNEL_DEFAULTS_FILE", str(tmp_path / "missing.yaml"))
        payload_file = write_payload(tmp_path, {})

        assert main([str(payload_file), "--database-url", database_url]) == 1

    def test_p1_failed_entry_exits_nonzero(self, tmp_path: Path, database_url: str, mocker):
        """[P1] A pass with recorded failures exits 1."""
        mocker.patch.object(
            SqlChannelStore,
            "create_or_replace_channel",
            side_effect=ChannelStoreError("disk full", operation="create_or_replace_channel"),
        )
        payload_file = write_payload(tmp_path, create_channel_list_payload("OS_a"))

        assert main([str(payload_file), "--database-url", database_url]) == 1


class TestApplyPayload:
    """Tests for apply_payload mode selection."""

    def test_p1_auto_mode_without_list_uses_channel_path(self, memory_store):
        """[P1] Auto mode without chnl_lst creates the fallback channel."""
        assert apply_payload(memory_store, {}) is True
        assert memory_store.list_channel_ids() == {FALLBACK_CHANNEL_ID}

    def test_p1_list_mode_without_list_is_noop(self, memory_store, capsys):
        """[P1] Forcing list mode on a payload without chnl_lst changes nothing."""
        memory_store.create_or_replace_channel(create_external_channel("OS_old"))

        assert apply_payload(memory_store, {}, mode="list") is True

        assert memory_store.list_channel_ids() == {"OS_old"}
        assert "nothing to reconcile" in capsys.readouterr().out

    def test_p2_channel_mode_ignores_list(self, memory_store):
        """[P2] Channel mode never deletes, even when chnl_lst is present."""
        memory_store.create_or_replace_channel(create_external_channel("OS_old"))
        payload = {**create_channel_list_payload("OS_a"), "chnl": {"id": "OS_b"}}

        apply_payload(memory_store, payload, mode="channel")

        assert memory_store.list_channel_ids() == {"OS_old", "OS_b"}
