"""Shared exceptions for the application.

This module contains exception classes used across the store, the channel
builder and the CLI so that services do not depend on each other's modules
for error types.
"""


class ConfigurationError(Exception):
    """Raised when configuration is present but unusable.

    For example a CHANNEL_DEFAULTS_FILE that cannot be read, is not valid
    YAML, or names fields that ChannelDefaults does not have.
    """

    pass


class PayloadError(Exception):
    """Raised when a payload file cannot be turned into a JSON object."""

    pass


class ChannelStoreError(Exception):
    """Raised when a channel store operation fails.

    The reconciler catches this per channel so one failing write or delete
    does not abort the rest of a pass.

    Attributes:
        operation: Store operation that failed (e.g. "delete_channel").
        channel_id: Channel or group id the operation targeted, if any.

    Example:
        >>> raise ChannelStoreError("disk full", operation="create_or_replace_channel",
        ...                         channel_id="OS_news")
        ChannelStoreError: disk full (operation=create_or_replace_channel, id=OS_news)
    """

    def __init__(self, message: str, operation: str, channel_id: str | None = None):
        self.operation = operation
        self.channel_id = channel_id
        super().__init__(message)

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.channel_id is None:
            return f"{base_message} (operation={self.operation})"
        return f"{base_message} (operation={self.operation}, id={self.channel_id})"
