"""End-to-end tests: a store wired from settings, writing real files."""

import json
import logging
from decimal import Decimal

import pytest

from nexa_ledger.config import DEFAULT_STORAGE_KEY, get_settings
from nexa_ledger.ledger import ReferentialFailure
from nexa_ledger.models import AuditEventType
from nexa_ledger.orchestrator import create_ledger_store
from nexa_ledger.seed import DEFAULT_STATE
from nexa_ledger.services import InMemorySnapshotStorage


class TestCreateLedgerStore:
    def test_first_run_starts_from_seed(self, audit_events):
        store = create_ledger_store(audit_sink=audit_events.append)

        assert store.is_open
        assert store.state == DEFAULT_STATE
        assert audit_events[0].event_type == AuditEventType.SNAPSHOT_SEEDED
        store.close()

    def test_snapshot_file_written_and_reloaded(self, ids):
        store = create_ledger_store(id_factory=ids)
        account = store.create_account("Travel")
        store.record_transaction("income", 2500, account.id, notes="Bonus")
        store.close()

        path = get_settings().storage.data_dir / f"{DEFAULT_STORAGE_KEY}.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["accounts"][-1] == {
            "id": "id-1", "name": "Travel", "currency": "INR", "balance": 2500,
        }
        assert data["transactions"][0]["accountId"] == "id-1"

        with create_ledger_store(open_store=False) as reopened:
            assert reopened.state.find_account("id-1").balance == Decimal("2500")

    def test_corrupt_file_recovers_to_seed(self, audit_events):
        data_dir = get_settings().storage.data_dir
        data_dir.mkdir(parents=True)
        (data_dir / f"{DEFAULT_STORAGE_KEY}.json").write_text("{oops", encoding="utf-8")

        store = create_ledger_store(audit_sink=audit_events.append)

        assert store.state == DEFAULT_STATE
        assert AuditEventType.SNAPSHOT_CORRUPTED in [e.event_type for e in audit_events]

    def test_settings_drive_policy_and_key(self, monkeypatch):
        monkeypatch.setenv("NEXA_LEDGER_REFERENTIAL_POLICY", "reject")
        monkeypatch.setenv("NEXA_STORAGE_KEY", "household")
        get_settings.cache_clear()
        storage = InMemorySnapshotStorage()

        store = create_ledger_store(storage=storage)

        with pytest.raises(ReferentialFailure):
            store.record_transaction("expense", 10, "ghost")
        assert storage.exists("household")
        assert not storage.exists(DEFAULT_STORAGE_KEY)

    def test_unopened_store(self):
        store = create_ledger_store(open_store=False)
        assert not store.is_open


class TestLoggingSettings:
    """App settings drive the package log level and audit log context."""

    @pytest.fixture(autouse=True)
    def restore_level(self):
        package_logger = logging.getLogger("nexa_ledger")
        level = package_logger.level
        yield
        package_logger.setLevel(level)

    def test_debug_mode_lowers_level(self, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "true")
        create_ledger_store(storage=InMemorySnapshotStorage())
        assert logging.getLogger("nexa_ledger").level == logging.DEBUG

    def test_default_level_is_info(self):
        create_ledger_store(storage=InMemorySnapshotStorage())
        assert logging.getLogger("nexa_ledger").level == logging.INFO

    def test_environment_is_bound_to_audit_lines(self, monkeypatch, caplog):
        monkeypatch.setenv("APP_ENVIRONMENT", "staging")
        caplog.set_level(logging.INFO, logger="nexa_ledger")

        store = create_ledger_store(storage=InMemorySnapshotStorage())
        store.create_account("Cash")

        audit_lines = [r.getMessage() for r in caplog.records if r.name == "nexa_ledger.audit"]
        assert audit_lines
        assert all('"environment": "staging"' in line for line in audit_lines)
