"""Business logic services for the channel registry."""

from notification_channels.services.channel_builder import (
    ID_SELECTION_RULES,
    ChannelBuilder,
    ChannelDefaults,
    IdSelection,
    load_channel_defaults,
)
from notification_channels.services.channel_list_reconciler import (
    ChannelListReconciler,
    ReconcileResult,
)
from notification_channels.services.channel_store import (
    ChannelStore,
    InMemoryChannelStore,
    SqlChannelStore,
)
from notification_channels.services.payload_loader import load_payload

__all__ = [
    "ID_SELECTION_RULES",
    "ChannelBuilder",
    "ChannelDefaults",
    "ChannelListReconciler",
    "ChannelStore",
    "IdSelection",
    "InMemoryChannelStore",
    "ReconcileResult",
    "SqlChannelStore",
    "load_channel_defaults",
    "load_payload",
]
