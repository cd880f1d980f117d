"""Shared pytest fixtures for channel registry tests.

This module provides reusable fixtures for the channel builder and list
reconciler, and isolates tests from environment variables that change
channel defaults.
"""

import pytest
import structlog

from notification_channels.config import get_database_url
from notification_channels.services.channel_builder import ChannelBuilder
from notification_channels.services.channel_list_reconciler import ChannelListReconciler
from notification_channels.services.channel_store import InMemoryChannelStore


@pytest.fixture(autouse=True)
def clean_channel_env(monkeypatch: pytest.MonkeyPatch):
    """Remove configuration environment variables for every test.

    Tests that need a variable set it explicitly with monkeypatch.
    """
    for name in (
        "DATABASE_URL",
        "DATABASE_ECHO",
        "MANAGED_CHANNEL_PREFIX",
        "DEVICE_LANGUAGE",
        "CHANNEL_DEFAULTS_FILE",
        "SOUNDS_DIR",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_database_url.cache_clear()
    yield
    get_database_url.cache_clear()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() calls so later tests don't log to a closed capture stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def builder(memory_store: InMemoryChannelStore) -> ChannelBuilder:
    """ChannelBuilder over the in-memory store with built-in defaults."""
    return ChannelBuilder(memory_store, language="en")


@pytest.fixture
def reconciler(memory_store: InMemoryChannelStore, builder: ChannelBuilder) -> ChannelListReconciler:
    """ChannelListReconciler sharing the builder's store, managed prefix "OS_"."""
    return ChannelListReconciler(memory_store, builder=builder, managed_prefix="OS_")


# Import additional fixtures from fixtures/ package
from tests.fixtures.stores import (  # noqa: F401, E402
    any_store,
    memory_store,
    sql_engine,
    sql_session_factory,
    sql_store,
)
