"""Notification channel registry sync.

This package keeps a device-local registry of notification channels in step
with the channel declarations pushed by a remote service: the channel
builder creates one channel from one declaration, and the list reconciler
applies a whole declared channel list, retiring managed channels that were
dropped from it.
"""

from notification_channels.services.channel_builder import ChannelBuilder, ChannelDefaults
from notification_channels.services.channel_list_reconciler import (
    ChannelListReconciler,
    ReconcileResult,
)
from notification_channels.services.channel_store import (
    ChannelStore,
    InMemoryChannelStore,
    SqlChannelStore,
)

__all__ = [
    "ChannelBuilder",
    "ChannelDefaults",
    "ChannelListReconciler",
    "ChannelStore",
    "InMemoryChannelStore",
    "ReconcileResult",
    "SqlChannelStore",
]
