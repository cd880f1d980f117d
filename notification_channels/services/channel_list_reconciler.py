"""Channel list reconciliation.

This module makes the channel store match a declared channel list pushed by
the remote service.

Algorithm (one pass per payload):
    1. No "chnl_lst", or an empty one → no-op.
    2. Build every declared channel in list order; collect the effective ids
       into a keep set.
    3. List the ids currently in the store.
    4. stale = managed ids − keep set − {fallback id}
    5. Delete every stale id.

Managed Channels:
    Only ids starting with the managed prefix (MANAGED_CHANNEL_PREFIX,
    default "OS_") were issued by the remote service and may be retired.
    Channels created by other means are never deleted. An empty prefix makes
    every unlisted channel except the fallback eligible.

Failure Handling:
    A ChannelStoreError while building one entry is logged and recorded; the
    remaining entries are still processed and the entry's declared id stays
    in the keep set, so a failed replace never turns into a deletion. Failed
    deletions are likewise recorded without aborting the pass.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from notification_channels.config import get_managed_channel_prefix
from notification_channels.exceptions import ChannelStoreError
from notification_channels.schemas.channel_payload import ChannelListPayload
from notification_channels.services.channel_builder import ChannelBuilder
from notification_channels.services.channel_store import ChannelStore

log = structlog.get_logger(__name__)


@dataclass
class ReconcileResult:
    """Summary of one reconciliation pass.

    Attributes:
        kept_ids: Effective ids of the declared channels, in list order.
        deleted_ids: Stale ids removed from the store.
        failed_ids: Ids whose build or deletion raised ChannelStoreError.
        skipped: True when the payload carried no channel list.
    """

    kept_ids: list[str] = field(default_factory=list)
    deleted_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def ok(self) -> bool:
        """True when every store operation in the pass succeeded."""
        return not self.failed_ids


class ChannelListReconciler:
    """Reconciles the channel store against a declared channel list.

    Args:
        store: Channel store shared with the builder.
        builder: Builder used for each declared channel. Defaults to a
            ChannelBuilder over the same store.
        managed_prefix: Id prefix of retirable channels. Defaults to
            MANAGED_CHANNEL_PREFIX.

    Example:
        >>> reconciler = ChannelListReconciler(store)
        >>> result = reconciler.process_channel_list({"chnl_lst": [{"id": "OS_news"}]})
        >>> result.kept_ids
        ['OS_news']
    """

    def __init__(
        self,
        store: ChannelStore,
        builder: ChannelBuilder | None = None,
        managed_prefix: str | None = None,
    ) -> None:
        self._store = store
        self._builder = builder or ChannelBuilder(store)
        self._managed_prefix = (
            managed_prefix if managed_prefix is not None else get_managed_channel_prefix()
        )

    def is_managed(self, channel_id: str) -> bool:
        """Return True if the channel was issued by the remote service."""
        return channel_id.startswith(self._managed_prefix)

    def process_channel_list(
        self, payload: Mapping[str, Any] | ChannelListPayload | None
    ) -> ReconcileResult:
        """Run one reconciliation pass.

        Args:
            payload: ``{"chnl_lst": [...]}``. Anything without a non-empty
                channel list leaves the store untouched.

        Returns:
            ReconcileResult describing the pass.

        Raises:
            ChannelStoreError: Only if listing the store's channel ids fails;
                per-channel failures are recorded in the result instead.
        """
        if not isinstance(payload, ChannelListPayload):
            payload = ChannelListPayload.model_validate(payload or {})

        result = ReconcileResult()
        if not payload.channel_list:
            log.debug("channel_list_absent")
            result.skipped = True
            return result

        keep: set[str] = set()
        for position, spec in enumerate(payload.channel_list):
            try:
                channel_id = self._builder.build_channel(spec)
            except ChannelStoreError as e:
                fallback_id = self._builder.defaults.fallback_channel_id
                channel_id = spec.id or fallback_id
                log.error(
                    "channel_build_failed",
                    channel_id=channel_id,
                    position=position,
                    operation=e.operation,
                    error=str(e),
                )
                result.failed_ids.append(channel_id)
            else:
                result.kept_ids.append(channel_id)
            keep.add(channel_id)

        stale = self._stale_ids(self._store.list_channel_ids(), keep)
        for channel_id in sorted(stale):
            try:
                self._store.delete_channel(channel_id)
            except ChannelStoreError as e:
                log.error("stale_channel_delete_failed", channel_id=channel_id, error=str(e))
                result.failed_ids.append(channel_id)
                continue
            log.info("stale_channel_deleted", channel_id=channel_id)
            result.deleted_ids.append(channel_id)

        log.info(
            "channel_list_processed",
            declared=len(payload.channel_list),
            kept=len(result.kept_ids),
            deleted=len(result.deleted_ids),
            failed=len(result.failed_ids),
        )
        return result

    def _stale_ids(self, existing_ids: set[str], keep: set[str]) -> set[str]:
        fallback_id = self._builder.defaults.fallback_channel_id
        managed = {channel_id for channel_id in existing_ids if self.is_managed(channel_id)}
        return managed - keep - {fallback_id}
