"""Reusable type definitions shared across peerswarm."""

from .base import ConfigModel
from .exceptions import (
    ConnectError,
    InvalidAddressError,
    InvalidFilterError,
    NameResolutionError,
    PersistenceError,
    ResolutionFailureError,
    ResolutionTimeoutError,
    SwarmError,
)

__all__ = [
    "ConfigModel",
    # Exceptions
    "SwarmError",
    "InvalidAddressError",
    "InvalidFilterError",
    "ResolutionTimeoutError",
    "ResolutionFailureError",
    "NameResolutionError",
    "PersistenceError",
    "ConnectError",
]
