"""Channel payload factories for test data generation.

Generates channel declarations (wire-format dicts), payloads, and resolved
channels standing in for channels created outside this system.
Uses deterministic defaults with override support for specific test scenarios.
"""

from typing import Any

from notification_channels.constants import (
    IMPORTANCE_DEFAULT,
    IMPORTANCE_MAX,
    VISIBILITY_SECRET,
)
from notification_channels.schemas.channel import ResolvedChannel


def create_channel_spec(channel_id: str | None = None, **fields: Any) -> dict[str, Any]:
    """Create a wire-format channel declaration.

    Args:
        channel_id: Value for "id"; omitted when None.
        **fields: Additional wire keys (nm, grp, imp, ...).

    Returns:
        Dict suitable for "chnl" or an entry of "chnl_lst".

    Example:
        >>> create_channel_spec("OS_news", nm="News")
        {'id': 'OS_news', 'nm': 'News'}
    """
    spec: dict[str, Any] = {}
    if channel_id is not None:
        spec["id"] = channel_id
    spec.update(fields)
    return spec


def create_full_channel_spec(channel_id: str = "test_id") -> dict[str, Any]:
    """Create a declaration with every attribute set to a non-default value."""
    return {
        "id": channel_id,
        "nm": "Test Name",
        "dscr": "Test Description",
        "grp": "grp_id",
        "grp_nm": "Group Name",
        "imp": IMPORTANCE_MAX,
        "lght": False,
        "ledc": "FFFF0000",
        "vib": False,
        "vib_pt": [1, 2, 3, 4],
        "snd_nm": "notification",
        "lck": VISIBILITY_SECRET,
        "bdg": True,
        "bdnd": True,
    }


def create_single_channel_payload(
    spec: dict[str, Any] | None = None,
    override_channel_id: str | None = None,
) -> dict[str, Any]:
    """Create a single-channel payload ({"chnl": ..., "oth_chnl": ...})."""
    payload: dict[str, Any] = {}
    if spec is not None:
        payload["chnl"] = spec
    if override_channel_id is not None:
        payload["oth_chnl"] = override_channel_id
    return payload


def create_channel_list_payload(*channel_ids: str) -> dict[str, Any]:
    """Create a list payload declaring one bare channel per id."""
    return {"chnl_lst": [create_channel_spec(channel_id) for channel_id in channel_ids]}


def create_external_channel(
    channel_id: str,
    name: str = "name",
    importance: int = IMPORTANCE_DEFAULT,
    **kwargs: Any,
) -> ResolvedChannel:
    """Create a channel as some other component of the device would.

    Returns:
        ResolvedChannel to write directly to a store, bypassing the builder.
    """
    return ResolvedChannel(id=channel_id, name=name, importance=importance, **kwargs)
