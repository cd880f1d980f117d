# Data factories for test data generation

from tests.support.factories.channel_factory import (
    create_channel_list_payload,
    create_channel_spec,
    create_external_channel,
    create_full_channel_spec,
    create_single_channel_payload,
)

__all__ = [
    "create_channel_list_payload",
    "create_channel_spec",
    "create_external_channel",
    "create_full_channel_spec",
    "create_single_channel_payload",
]
