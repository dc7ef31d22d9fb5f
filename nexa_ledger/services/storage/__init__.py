"""
Storage Services Package

Provides the abstract snapshot storage interface and its implementations.
Files are the default backend; the in-memory one serves tests.
"""

from nexa_ledger.services.storage.interface import (
    SnapshotReadError,
    SnapshotStorageInterface,
    SnapshotWriteError,
    StorageError,
)
from nexa_ledger.services.storage.file_storage import FileSnapshotStorage
from nexa_ledger.services.storage.memory import InMemorySnapshotStorage

__all__ = [
    # Interfaces
    "SnapshotStorageInterface",
    # Exceptions
    "SnapshotReadError",
    "SnapshotWriteError",
    "StorageError",
    # Implementations
    "FileSnapshotStorage",
    "InMemorySnapshotStorage",
]
