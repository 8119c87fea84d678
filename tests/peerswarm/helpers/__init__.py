"""Test helpers for peerswarm unit tests."""

from __future__ import annotations

from .builders import (
    BOOTSTRAP_PEER_IDS,
    make_peer_address,
    make_peer_id,
)
from .mocks import (
    FailingFilters,
    FakeConnection,
    FakeHost,
    MemoryConfigStore,
    StubResolver,
)

__all__ = [
    # Builders
    "BOOTSTRAP_PEER_IDS",
    "make_peer_address",
    "make_peer_id",
    # Mocks
    "FailingFilters",
    "FakeConnection",
    "FakeHost",
    "MemoryConfigStore",
    "StubResolver",
]
