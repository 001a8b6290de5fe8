"""
File-based store for fallback records.

Keeps the whole list in one JSON file, the local-storage analogue of the
widget's ``bugspot_widget_reports`` key. Every write reads the full list,
appends, and swaps a fully written temp file into place; only a single
writer process is assumed.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List

from bugspot.domain.errors import ReportStorageError
from bugspot.interfaces.repository import ILocalReportStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "bugspot_widget_reports"


class JsonFileReportStore(ILocalReportStore):
    """JSON-file backed list of fallback records."""

    def __init__(self, storage_dir: str, key: str = STORAGE_KEY):
        """Initialize file store.

        Args:
            storage_dir: Directory holding the store file (created on write)
            key: Storage key; the file is ``<key>.json``
        """
        self._path = Path(storage_dir).expanduser() / f"{key}.json"
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> List[Dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ReportStorageError(f"Cannot read {self._path}: {e}") from e
        if not isinstance(data, list):
            raise ReportStorageError(f"{self._path} does not contain a list")
        return data

    def _write(self, records: List[Dict[str, Any]]) -> None:
        """Replace the file atomically; the old list survives a failed write."""
        try:
            content = json.dumps(records, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ReportStorageError(f"Cannot serialize records for {self._path}: {e}") from e

        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self._path.parent), prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise ReportStorageError(f"Cannot write {self._path}: {e}") from e

    def load_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._read()

    def append(self, record: Dict[str, Any]) -> None:
        with self._lock:
            records = self._read()
            records.append(record)
            self._write(records)
        logger.debug("Stored record %s in %s", record.get("id"), self._path)

    def remove(self, record_id: str) -> bool:
        with self._lock:
            records = self._read()
            kept = [r for r in records if r.get("id") != record_id]
            if len(kept) == len(records):
                return False
            self._write(kept)
            return True

    def clear(self) -> None:
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise ReportStorageError(f"Cannot remove {self._path}: {e}") from e
