"""Cross-cutting utilities for the channel registry.

This package contains helper functions used across multiple modules.
Utilities are pure functions or small callables without reconciliation logic.

Modules:
    colors: LED color parsing into signed ARGB ints.
    sounds: Sound-name resolution for notification channels.
    logging: structlog configuration.
"""

from notification_channels.utils.colors import parse_light_color, to_signed_argb
from notification_channels.utils.sounds import (
    DirectorySoundResolver,
    SoundResolver,
    no_sound_resources,
)

__all__ = [
    "DirectorySoundResolver",
    "SoundResolver",
    "no_sound_resources",
    "parse_light_color",
    "to_signed_argb",
]
