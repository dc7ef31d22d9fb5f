"""
File Snapshot Storage Implementation

DESIGN DECISION: Snapshots live as one JSON file per key in a data
directory because:
1. No database setup required for a single-user ledger
2. Users can inspect or back up their data with ordinary tools
3. Whole-file replacement matches "overwrite the snapshot" exactly

Writes go to a temporary file in the same directory which is then moved
over the target with os.replace, so readers see either the old or the new
snapshot and never a half-written one. Transient OS errors are retried.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from nexa_ledger.config import get_settings
from nexa_ledger.services.storage.interface import (
    SnapshotReadError,
    SnapshotStorageInterface,
    SnapshotWriteError,
)


SNAPSHOT_SUFFIX = ".json"

logger = structlog.get_logger(__name__)


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "snapshot_write_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )


class FileSnapshotStorage(SnapshotStorageInterface):
    """
    File system implementation of snapshot storage.

    Each key maps to `<data_dir>/<key>.json`.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        write_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
        self._retrying = Retrying(
            stop=stop_after_attempt(write_attempts or settings.write_attempts),
            wait=wait_exponential(multiplier=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            before_sleep=_log_retry,
            reraise=True,
        )

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file path a key is stored at."""
        return self._data_dir / f"{key}{SNAPSHOT_SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        """Read a snapshot file, or None if it does not exist."""
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotReadError(f"Failed to read snapshot {path}: {e}") from e

    def write(self, key: str, payload: str) -> None:
        """Atomically replace the snapshot file for a key."""
        path = self.path_for(key)
        try:
            self._retrying(self._replace_file, path, payload)
        except (OSError, RetryError) as e:
            raise SnapshotWriteError(f"Failed to write snapshot {path}: {e}") from e

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def _replace_file(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError:
            # Leave no stray temp files behind on a failed attempt
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
