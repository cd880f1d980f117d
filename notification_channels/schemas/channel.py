"""Resolved channel and group schemas.

These are the fully specified objects the channel builder hands to the
channel store. Every attribute has a concrete value; defaults were applied
while resolving the inbound ChannelSpec.
"""

from pydantic import BaseModel, ConfigDict, Field

from notification_channels.constants import (
    DEFAULT_NOTIFICATION_SOUND_URI,
    FALLBACK_CHANNEL_NAME,
    IMPORTANCE_DEFAULT,
    VISIBILITY_PUBLIC,
)


class ChannelGroup(BaseModel):
    """A named container grouping related channels in system UI.

    Attributes:
        id: Group identifier, referenced by ResolvedChannel.group_id.
        name: Display name.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str


class ResolvedChannel(BaseModel):
    """A notification channel as held in the channel store.

    The id is the store's primary key and never changes once written;
    changing the group requires deleting and recreating the channel.

    Attributes:
        id: Channel identifier.
        name: Display name.
        description: Optional user-facing description.
        importance: Importance level (0 NONE .. 5 MAX).
        show_lights: Whether the notification LED is used.
        light_color: Signed 32-bit ARGB LED color, 0 for the platform default.
        vibrate: Whether notifications vibrate.
        vibration_pattern: Alternating off/on durations in ms, or None.
        sound: Sound URI, or None for a silent channel.
        lockscreen_visibility: -1 SECRET, 0 PRIVATE, 1 PUBLIC.
        show_badge: Whether the launcher badge is shown.
        bypass_dnd: Whether notifications bypass do-not-disturb.
        group_id: Id of the owning ChannelGroup, or None.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = FALLBACK_CHANNEL_NAME
    description: str | None = None
    importance: int = IMPORTANCE_DEFAULT
    show_lights: bool = True
    light_color: int = 0
    vibrate: bool = True
    vibration_pattern: tuple[int, ...] | None = None
    sound: str | None = DEFAULT_NOTIFICATION_SOUND_URI
    lockscreen_visibility: int = VISIBILITY_PUBLIC
    show_badge: bool = True
    bypass_dnd: bool = False
    group_id: str | None = None

    def __repr__(self) -> str:
        """Return compact representation for debugging."""
        group = f", group={self.group_id!r}" if self.group_id else ""
        return (
            f"ResolvedChannel(id={self.id!r}, name={self.name!r}, "
            f"importance={self.importance}{group})"
        )
