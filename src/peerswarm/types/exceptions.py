"""Exception hierarchy for peer address resolution and address filtering."""

from __future__ import annotations

from pathlib import Path


class SwarmError(Exception):
    """
    Base exception for all swarm-level errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidAddressError(SwarmError, ValueError):
    """
    Raised when an address is malformed or lacks a trailing peer identity.

    Client-caused; retrying with the same input fails again.

    Attributes:
        address: The offending address string.
        detail: What was wrong with it.
    """

    def __init__(self, address: str, detail: str) -> None:
        self.address = address
        self.detail = detail
        super().__init__(f"invalid peer address {address!r}: {detail}")


class InvalidFilterError(SwarmError, ValueError):
    """
    Raised when a filter mask cannot be parsed.

    Attributes:
        filter: The offending filter text (empty when no filter was given).
        detail: What was wrong with it.
    """

    def __init__(self, filter: str, detail: str) -> None:
        self.filter = filter
        self.detail = detail
        if filter:
            msg = f"invalid filter {filter!r}: {detail}"
        else:
            msg = detail
        super().__init__(msg)


class ResolutionTimeoutError(SwarmError):
    """
    Raised when the shared resolution deadline elapses.

    Callers may retry with a longer deadline.

    Attributes:
        timeout: The deadline in seconds that was exceeded.
        pending: Number of addresses that were still being resolved.
    """

    def __init__(self, timeout: float, pending: int) -> None:
        self.timeout = timeout
        self.pending = pending
        super().__init__(f"resolving {pending} address(es) timed out after {timeout:g}s")


class ResolutionFailureError(SwarmError):
    """
    Raised when an address resolves to no peer-identity-terminated candidate.

    A single failure aborts the whole batch.

    Attributes:
        address: The address that produced no usable candidate.
    """

    def __init__(self, address: str, detail: str | None = None) -> None:
        self.address = address
        self.detail = detail
        msg = f"found no peers at {address}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class NameResolutionError(SwarmError):
    """
    Raised by a name resolver when a lookup fails.

    Attributes:
        name: The DNS name that failed to resolve.
    """

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"failed to resolve {name}: {detail}")


class PersistenceError(SwarmError):
    """
    Raised when a configuration or key file cannot be read or written.

    Attributes:
        path: The file involved.
        operation: Either "read" or "write".
        kind: What the file holds, "config" unless stated.
    """

    def __init__(
        self,
        path: Path | str,
        operation: str,
        detail: str,
        kind: str = "config",
    ) -> None:
        self.path = Path(path)
        self.operation = operation
        self.detail = detail
        self.kind = kind
        super().__init__(f"failed to {operation} {kind} {self.path}: {detail}")


class ConnectError(SwarmError):
    """
    Raised when dialing a resolved peer fails.

    Attributes:
        peer_id: Base58 form of the peer that could not be dialed.
    """

    def __init__(self, peer_id: str, detail: str) -> None:
        self.peer_id = peer_id
        self.detail = detail
        super().__init__(f"connect {peer_id} failure: {detail}")
