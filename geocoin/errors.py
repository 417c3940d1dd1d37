"""Exceptions raised by the Geocoin core.

None of these are fatal: each one is recoverable at the call site that
triggered the offending player action (re-enable the collect button, leave the
inventory unchanged, fall back to a freshly generated cache, keep playing
without persistence).
"""

from __future__ import annotations

from typing import Optional


class GeocoinError(Exception):
    """Base class for all Geocoin errors."""


class NotFoundError(GeocoinError, LookupError):
    """Raised when a coin is not where the caller believes it is.

    Covers collecting a coin that is not (or no longer) available in a cache
    and depositing a coin that the inventory does not hold. Both mean the
    caller's view of the world drifted from the session state.
    """

    def __init__(self, *, coin_label: str, container: str) -> None:
        self.coin_label = coin_label
        self.container = container
        super().__init__(f"Coin {coin_label} not found in {container}")


class MalformedSnapshotError(GeocoinError, ValueError):
    """Raised when a momento string does not parse into coin records."""

    def __init__(self, *, snapshot: str, record: Optional[str] = None, reason: str = "") -> None:
        self.snapshot = snapshot
        self.record = record
        self.reason = reason
        message = f"Malformed momento {snapshot!r}"
        if record is not None:
            message += f" (record {record!r})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StorageUnavailableError(GeocoinError):
    """Raised when the blob store is missing or fails to read/write."""

    def __init__(self, *, operation: str, underlying: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.underlying = underlying
        message = f"Storage unavailable during {operation}"
        if underlying is not None:
            message += f": {underlying}"
        super().__init__(message)
