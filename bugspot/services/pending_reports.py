"""Manage fallback records that never reached the server."""
import json
from typing import Any, Dict, List

from bugspot.domain.bug_report import PENDING_STATUS
from bugspot.interfaces.repository import ILocalReportStore


class PendingReportService:
    """List, export and delete locally stored fallback records.

    Records stay here until the user exports or deletes them; nothing
    re-submits them to the server.
    """

    def __init__(self, store: ILocalReportStore):
        self._store = store

    def list_pending(self) -> List[Dict[str, Any]]:
        return [r for r in self._store.load_all() if r.get("status") == PENDING_STATUS]

    def get(self, record_id: str) -> Dict[str, Any]:
        for record in self._store.load_all():
            if record.get("id") == record_id:
                return record
        raise KeyError(record_id)

    def export_json(self) -> str:
        """All stored records as pretty-printed JSON."""
        return json.dumps(self._store.load_all(), indent=2, ensure_ascii=False)

    def delete(self, record_id: str) -> bool:
        return self._store.remove(record_id)

    def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        removed = self._store.count()
        self._store.clear()
        return removed
