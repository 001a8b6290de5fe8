"""In-memory stand-in for the BugSpot API.

Accepts every valid report and assigns it a server-style id. Used for demos,
offline development and tests of code that sits above the repository.
"""
import uuid
from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional

from bugspot.domain.bug_report import BugReport
from bugspot.domain.result import ErrorKind, SubmissionResult
from bugspot.interfaces.repository import IBugReportRepository


class InMemoryBugReportRepository(IBugReportRepository):
    """Server-side mock: keeps accepted reports in a dict keyed by id."""

    def __init__(self):
        self._reports: Dict[str, BugReport] = {}
        self._lock = Lock()

    def submit(self, report: BugReport) -> SubmissionResult:
        error = report.validate()
        if error:
            return SubmissionResult.failure(error, ErrorKind.VALIDATION)
        report_id = str(uuid.uuid4())
        with self._lock:
            self._reports[report_id] = replace(report, id=report_id)
        return SubmissionResult.accepted(report_id)

    def get(self, report_id: str) -> Optional[BugReport]:
        with self._lock:
            return self._reports.get(report_id)

    def all(self) -> List[BugReport]:
        with self._lock:
            return list(self._reports.values())
