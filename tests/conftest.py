"""Shared fixtures: deterministic ids and settings isolated from the host."""

import itertools

import pytest

from nexa_ledger.audit import AuditLogger
from nexa_ledger.config import get_settings


class SequentialIds:
    """Id factory producing id-1, id-2, ... so tests can predict ids."""

    def __init__(self, prefix: str = "id"):
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Point storage at a temp dir and clear any NEXA_* overrides."""
    for var in (
        "NEXA_STORAGE_KEY",
        "NEXA_STORAGE_WRITE_ATTEMPTS",
        "NEXA_LEDGER_REFERENTIAL_POLICY",
        "NEXA_LEDGER_AUTOSAVE",
        "APP_ENVIRONMENT",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NEXA_STORAGE_DATA_DIR", str(tmp_path / "ledger-data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def audit_events():
    return []


@pytest.fixture
def audit_logger(audit_events):
    return AuditLogger(sink=audit_events.append)
