"""
Abstract Snapshot Storage Interface

DESIGN DECISION: We define an abstract interface for the durable store.
This allows us to:
1. Keep snapshots in plain files today and elsewhere later
2. Use in-memory storage for testing
3. Keep the persistence adapter decoupled from where bytes live

The interface is intentionally simple: one opaque text payload per key.
The ledger writes exactly one key.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for snapshot storage operations.

    Writes overwrite the previous payload. There is no conflict detection:
    if several processes write the same key, the last write wins.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the payload stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            SnapshotReadError: If the payload exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """
        Store a payload under a key, replacing any previous value.

        Args:
            key: The storage key
            payload: Serialized snapshot text

        Raises:
            SnapshotWriteError: If the write fails
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether anything is stored under a key."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotReadError(StorageError):
    """Stored payload exists but could not be read."""
    pass


class SnapshotWriteError(StorageError):
    """Payload could not be written."""
    pass
