"""In-memory snapshot storage, for tests and for embedding without a disk."""

from typing import Optional

from nexa_ledger.services.storage.interface import SnapshotStorageInterface


class InMemorySnapshotStorage(SnapshotStorageInterface):
    """Dict-backed storage. Counts writes so callers can assert on them."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, payload: str) -> None:
        self._data[key] = payload
        self.write_count += 1

    def exists(self, key: str) -> bool:
        return key in self._data
