"""Apply a channel payload file to the persistent channel store.

Usage:
    apply-channel-payload payload.json
    apply-channel-payload payload.json --mode list --database-url sqlite:///channels.db
    apply-channel-payload payload.json --console-logs

Modes:
    auto     List reconciliation when the payload has "chnl_lst",
             single-channel creation otherwise (default).
    channel  Single-channel creation ("chnl" / "oth_chnl").
    list     List reconciliation ("chnl_lst").

Exit codes:
    0  Payload applied.
    1  Payload or configuration unusable, or a store operation failed.
"""

import argparse
import sys
from pathlib import Path

import structlog

from notification_channels.constants import PAYLOAD_CHANNEL_LIST_KEY
from notification_channels.database import create_session_factory
from notification_channels.exceptions import (
    ChannelStoreError,
    ConfigurationError,
    PayloadError,
)
from notification_channels.services.channel_builder import ChannelBuilder
from notification_channels.services.channel_list_reconciler import ChannelListReconciler
from notification_channels.services.channel_store import ChannelStore, SqlChannelStore
from notification_channels.services.payload_loader import load_payload
from notification_channels.utils.logging import configure_logging

log = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apply-channel-payload",
        description="Apply a notification channel payload to the channel store.",
    )
    parser.add_argument("payload", type=Path, help="Path to the payload JSON file")
    parser.add_argument(
        "--mode",
        choices=("auto", "channel", "list"),
        default="auto",
        help="Which payload path to run (default: auto)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL of the channel store (default: DATABASE_URL)",
    )
    parser.add_argument(
        "--console-logs",
        action="store_true",
        help="Render logs for humans instead of JSON",
    )
    return parser


def apply_payload(store: ChannelStore, payload: dict, mode: str = "auto") -> bool:
    """Run the selected payload path against a store and print a summary.

    Returns:
        True when every store operation succeeded.
    """
    builder = ChannelBuilder.from_config(store)

    if mode == "list" or (mode == "auto" and PAYLOAD_CHANNEL_LIST_KEY in payload):
        reconciler = ChannelListReconciler(store, builder=builder)
        result = reconciler.process_channel_list(payload)
        if result.skipped:
            print("No channel list in payload, nothing to reconcile")
            return True
        print(f"Kept {len(result.kept_ids)} channel(s): {', '.join(result.kept_ids)}")
        if result.deleted_ids:
            print(f"Deleted {len(result.deleted_ids)} stale channel(s): {', '.join(result.deleted_ids)}")
        if result.failed_ids:
            print(f"Failed {len(result.failed_ids)} channel(s): {', '.join(result.failed_ids)}")
        return result.ok

    channel_id = builder.create_notification_channel(payload)
    print(f"Channel in use: {channel_id}")
    return True


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(json_output=False if args.console_logs else None)

    try:
        payload = load_payload(args.payload)
        store = SqlChannelStore(create_session_factory(args.database_url))
        ok = apply_payload(store, payload, args.mode)
    except (PayloadError, ConfigurationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except ChannelStoreError as e:
        log.error("apply_payload_failed", operation=e.operation, error=str(e))
        print(f"ERROR: channel store failure: {e}", file=sys.stderr)
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
