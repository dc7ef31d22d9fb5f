"""
Ledger Persistence Adapter

Saves and restores the single ledger snapshot.

GUARANTEES:
- load() never raises: a missing snapshot yields the seed state, an
  unreadable or invalid one is logged and also yields the seed state
- Snapshots written by older versions load: absent top-level fields are
  back-filled from the seed one by one
- save() overwrites the previous snapshot; saving the same state twice is
  harmless
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from nexa_ledger.audit import AuditLogger
from nexa_ledger.config import DEFAULT_STORAGE_KEY
from nexa_ledger.models.audit import AuditEventBuilder
from nexa_ledger.models.ledger import LedgerState
from nexa_ledger.seed import default_state
from nexa_ledger.services.storage.interface import (
    SnapshotReadError,
    SnapshotStorageInterface,
)


SNAPSHOT_FIELDS = ("currency", "accounts", "categories", "subcategories", "transactions")


class SnapshotCorruptedError(ValueError):
    """Stored snapshot is not a valid ledger state. Never leaves this module."""
    pass


def merge_with_seed(data: dict[str, Any], seed: LedgerState) -> dict[str, Any]:
    """
    Back-fill absent or null top-level fields from the seed snapshot.

    Present fields are kept as stored, even when empty.
    """
    seed_snapshot = seed.to_snapshot()
    merged = dict(data)
    for field in SNAPSHOT_FIELDS:
        if merged.get(field) is None:
            merged[field] = seed_snapshot[field]
    return merged


def decode_snapshot(raw: str, seed: LedgerState) -> LedgerState:
    """
    Parse stored text into a ledger state.

    Raises:
        SnapshotCorruptedError: If the text is not JSON, not an object,
            or does not describe a valid ledger state
    """
    # ValueError covers JSONDecodeError and over-long integer literals;
    # RecursionError comes from pathologically deep nesting
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise SnapshotCorruptedError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotCorruptedError(
            f"Snapshot must be a JSON object, got {type(data).__name__}"
        )

    try:
        return LedgerState.from_snapshot(merge_with_seed(data, seed))
    except ValidationError as e:
        raise SnapshotCorruptedError(f"Snapshot failed validation: {e}") from e


def encode_snapshot(state: LedgerState) -> str:
    return json.dumps(state.to_snapshot(), ensure_ascii=False, separators=(",", ":"))


class LedgerPersistence:
    """
    Loads and saves the ledger snapshot under one fixed key.

    Storage failures on load are recovered here. Failures on save are
    raised as StorageError for the caller to decide on.
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        key: str = DEFAULT_STORAGE_KEY,
        seed: Optional[LedgerState] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._seed = seed if seed is not None else default_state()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    @property
    def seed(self) -> LedgerState:
        return self._seed

    def load(self) -> LedgerState:
        """
        Load the stored snapshot, falling back to the seed state.

        Returns:
            The stored state merged with the seed, or the seed itself
        """
        try:
            raw = self._storage.read(self._key)
        except SnapshotReadError as e:
            self._audit_logger.log(AuditEventBuilder.snapshot_corrupted(self._key, str(e)))
            return self._seed

        if not raw:
            self._audit_logger.log(AuditEventBuilder.snapshot_seeded(self._key))
            return self._seed

        try:
            state = decode_snapshot(raw, self._seed)
        except SnapshotCorruptedError as e:
            self._audit_logger.log(AuditEventBuilder.snapshot_corrupted(self._key, str(e)))
            return self._seed

        self._audit_logger.log(
            AuditEventBuilder.snapshot_loaded(
                self._key,
                accounts=len(state.accounts),
                transactions=len(state.transactions),
            )
        )
        return state

    def save(self, state: LedgerState) -> None:
        """
        Serialize and store the full snapshot, replacing the previous one.

        Raises:
            StorageError: If the backend cannot store the payload
        """
        payload = encode_snapshot(state)
        self._storage.write(self._key, payload)
        self._audit_logger.log(
            AuditEventBuilder.snapshot_saved(self._key, len(payload.encode("utf-8")))
        )
