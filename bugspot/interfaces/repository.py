"""
Repository interfaces for bug report persistence.

Following the Repository pattern to keep the submission use case unaware of
whether reports go to the BugSpot API, an in-memory double, or local storage.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from bugspot.domain.bug_report import BugReport
from bugspot.domain.result import SubmissionResult


class IBugReportRepository(ABC):
    """Interface for durably recording a bug report."""

    @abstractmethod
    def submit(self, report: BugReport) -> SubmissionResult:
        """Record a bug report.

        Args:
            report: The assembled report

        Returns:
            SubmissionResult; implementations never raise for expected failures
        """
        pass


class ILocalReportStore(ABC):
    """Interface for the local list of fallback records."""

    @abstractmethod
    def load_all(self) -> List[Dict[str, Any]]:
        """Return every stored record, oldest first.

        Raises:
            ReportStorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    def append(self, record: Dict[str, Any]) -> None:
        """Append one record to the end of the list.

        Raises:
            ReportStorageError: If the record cannot be written
        """
        pass

    @abstractmethod
    def remove(self, record_id: str) -> bool:
        """Remove a record by id.

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all records."""
        pass

    def count(self) -> int:
        """Number of stored records."""
        return len(self.load_all())
