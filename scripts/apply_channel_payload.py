#!/usr/bin/env python3
"""Apply a channel payload JSON file to the channel store.

Usage:
    python scripts/apply_channel_payload.py payload.json [--mode auto|channel|list]
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from notification_channels.cli import main

if __name__ == "__main__":
    sys.exit(main())
