#!/usr/bin/env python3
"""List notification channels and groups in the channel store."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from notification_channels.database import create_session_factory
from notification_channels.models import NotificationChannel, NotificationChannelGroup


def check_channels() -> None:
    """Print every channel with its group and main attributes."""
    try:
        session_factory = create_session_factory()
        with session_factory() as session:
            groups = session.execute(select(NotificationChannelGroup)).scalars().all()
            channels = session.execute(
                select(NotificationChannel).order_by(NotificationChannel.channel_id)
            ).scalars().all()

            if not channels:
                print("❌ No channels found in channel store")
                print("   Apply a payload with scripts/apply_channel_payload.py first")
                return

            print(f"✅ Found {len(channels)} channel(s) in {len(groups)} group(s):")
            print()
            for channel in channels:
                print(f"Channel ID: {channel.channel_id}")
                print(f"  Name: {channel.name}")
                print(f"  Group: {channel.group_id or '-'}")
                print(f"  Importance: {channel.importance}")
                print(f"  Sound: {channel.sound or 'silent'}")
                print(f"  Vibrate: {channel.vibrate} pattern={channel.vibration_pattern}")
                print()

    except Exception as e:
        print(f"ERROR: Failed to query channel store: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    check_channels()
