"""Services package."""

from nexa_ledger.services.persistence import (
    LedgerPersistence,
    decode_snapshot,
    encode_snapshot,
    merge_with_seed,
)
from nexa_ledger.services.storage import (
    FileSnapshotStorage,
    InMemorySnapshotStorage,
    SnapshotReadError,
    SnapshotStorageInterface,
    SnapshotWriteError,
    StorageError,
)

__all__ = [
    # Persistence
    "LedgerPersistence",
    "decode_snapshot",
    "encode_snapshot",
    "merge_with_seed",
    # Storage services
    "FileSnapshotStorage",
    "InMemorySnapshotStorage",
    "SnapshotReadError",
    "SnapshotStorageInterface",
    "SnapshotWriteError",
    "StorageError",
]
