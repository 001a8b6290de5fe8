"""
In-memory store for fallback records.
"""
import copy
from threading import Lock
from typing import Any, Dict, List, Optional

from bugspot.domain.errors import ReportStorageError
from bugspot.interfaces.repository import ILocalReportStore


class InMemoryReportStore(ILocalReportStore):
    """Thread-safe in-memory list of fallback records.

    ``capacity`` mimics a storage quota: appending past it raises
    ReportStorageError.
    """

    def __init__(self, capacity: Optional[int] = None):
        self._records: List[Dict[str, Any]] = []
        self._capacity = capacity
        self._lock = Lock()

    def load_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._records)

    def append(self, record: Dict[str, Any]) -> None:
        with self._lock:
            if self._capacity is not None and len(self._records) >= self._capacity:
                raise ReportStorageError("Storage quota exceeded")
            self._records.append(copy.deepcopy(record))

    def remove(self, record_id: str) -> bool:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.get("id") != record_id]
            return len(self._records) != before

    def clear(self) -> None:
        with self._lock:
            self._records = []
