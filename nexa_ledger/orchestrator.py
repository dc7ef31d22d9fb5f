"""
Composition root for Nexa Ledger

This module wires the components together once, at application start:
settings → logging → storage backend → persistence adapter → validator → store.

DESIGN DECISION: There is no module-level store. Callers build one with
create_ledger_store(), pass it to whatever needs it and close it when done.
"""

from typing import Optional

from nexa_ledger.audit import AuditLogger, AuditSink, configure_logging
from nexa_ledger.config import Settings, get_settings
from nexa_ledger.identifiers import IdFactory
from nexa_ledger.ledger import LedgerStore
from nexa_ledger.services.persistence import LedgerPersistence
from nexa_ledger.services.storage import FileSnapshotStorage, SnapshotStorageInterface
from nexa_ledger.validation import IntentValidator


def create_ledger_store(
    settings: Optional[Settings] = None,
    storage: Optional[SnapshotStorageInterface] = None,
    audit_sink: Optional[AuditSink] = None,
    id_factory: Optional[IdFactory] = None,
    open_store: bool = True,
) -> LedgerStore:
    """
    Factory function to create a ready-to-use ledger store.

    Args:
        settings: Settings to use. If None, uses get_settings().
        storage: Snapshot backend. If None, files under the configured
                 data directory.
        audit_sink: Optional callable receiving every audit event.
        id_factory: Optional id source (tests pass a deterministic one).
        open_store: Load the snapshot before returning.

    Returns:
        The store, opened unless open_store is False
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    ledger_settings = settings.ledger
    app_settings = settings.app

    configure_logging(app_settings.debug_mode)
    audit_logger = AuditLogger(audit_sink, environment=app_settings.app_environment)

    if storage is None:
        storage = FileSnapshotStorage(
            data_dir=storage_settings.data_dir,
            write_attempts=storage_settings.write_attempts,
        )

    persistence = LedgerPersistence(
        storage,
        key=storage_settings.key,
        audit_logger=audit_logger,
    )

    store = LedgerStore(
        persistence=persistence,
        validator=IntentValidator(ledger_settings.referential_policy),
        id_factory=id_factory,
        audit_logger=audit_logger,
        autosave=ledger_settings.autosave,
    )

    if open_store:
        store.open()

    return store
