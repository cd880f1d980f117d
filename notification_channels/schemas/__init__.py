"""Pydantic schemas for inbound payloads and resolved channel objects."""

from notification_channels.schemas.channel import ChannelGroup, ResolvedChannel
from notification_channels.schemas.channel_payload import (
    ChannelListPayload,
    ChannelSpec,
    ChannelText,
)

__all__ = [
    "ChannelGroup",
    "ChannelListPayload",
    "ChannelSpec",
    "ChannelText",
    "ResolvedChannel",
]
