"""
Collaborator contract every database backend adapter implements.
"""
from typing import Any, Callable, List, Optional, Protocol, Sequence

from ..core.resolver import Address

# Receives (snapshots, None) for a batch or (None, error) on failure
SnapshotCallback = Callable[[Optional[Sequence[Any]], Optional[BaseException]], None]


class Listener(Protocol):
    """A live backend subscription."""

    def cancel(self) -> None:
        ...


class DatabaseBackend(Protocol):
    """
    Adapter around a vendor database SDK.

    Handles are whatever the SDK uses as references. Every vendor failure is
    raised as `TransportError`; an address the backend cannot serve raises
    `UnsupportedOperationError`.
    """

    def connect(self, address: Address) -> Any:
        """Turn a resolved address into an SDK reference."""
        ...

    def child(self, handle: Any, identifier: str) -> Any:
        """Reference to one record inside a container handle."""
        ...

    def identifier(self, handle: Any) -> Optional[str]:
        """Backend-assigned identifier of a record handle."""
        ...

    def fetch_one(self, handle: Any) -> Any:
        """Read one snapshot. Missing records come back with `exists` False."""
        ...

    def fetch_all(self, handle: Any) -> List[Any]:
        """Read every snapshot under a container handle."""
        ...

    def listen(self, handle: Any, callback: SnapshotCallback) -> Listener:
        """Stream full result batches for a handle until cancelled."""
        ...

    def create(self, handle: Any, fields: dict) -> Any:
        """Write a new record under a container and return its handle."""
        ...

    def delete(self, handle: Any) -> None:
        ...
