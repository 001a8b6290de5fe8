"""BugSpot API repository with local fallback.

Submits reports to ``POST /api/bug-reports/submit``. Client errors (400/401)
are returned to the caller as failures. Connectivity problems (timeouts,
connection errors, any other error status) write the report to the local
store as a ``pending`` record instead, so it is not lost.
"""
import json
import logging
from datetime import datetime
from typing import Callable, Optional

import requests

from bugspot.domain.bug_report import BugReport, LOCAL_ID_PREFIX, PENDING_STATUS
from bugspot.domain.errors import ReportStorageError
from bugspot.domain.result import ErrorKind, SubmissionResult
from bugspot.interfaces.repository import IBugReportRepository, ILocalReportStore
from bugspot.services.clock import epoch_millis, iso_timestamp, utc_now
from .http_client import BugSpotHttpClient

logger = logging.getLogger(__name__)

# Bad input or bad key: never saved locally
NON_FALLBACK_STATUSES = (400, 401)


def _error_message(response: Optional[requests.Response]) -> str:
    if response is None:
        return "API error: no response"
    message = f"API error: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return message
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return message


class ApiBugReportRepository(IBugReportRepository):
    """Submits reports to the BugSpot API, falling back to a local store."""

    def __init__(
        self,
        client: BugSpotHttpClient,
        fallback_store: ILocalReportStore,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize repository.

        Args:
            client: HTTP client configured with API URL, key and timeout
            fallback_store: Where reports go when the API is unreachable
            clock: Returns the current UTC datetime
        """
        self._client = client
        self._store = fallback_store
        self._clock = clock or utc_now

    @property
    def fallback_store(self) -> ILocalReportStore:
        return self._store

    def submit(self, report: BugReport) -> SubmissionResult:
        error = report.validate()
        if error:
            return SubmissionResult.failure(error, ErrorKind.VALIDATION)
        if not self._client.has_api_key:
            return SubmissionResult.failure("API key is required", ErrorKind.VALIDATION)

        try:
            body = self._client.submit_bug_report(report.to_dict())
        except requests.HTTPError as e:
            message = _error_message(e.response)
            status = e.response.status_code if e.response is not None else None
            if status in NON_FALLBACK_STATUSES:
                logger.warning("Bug report rejected by API (%s): %s", status, message)
                return SubmissionResult.failure(message, ErrorKind.CLIENT)
            logger.warning("API submission failed, falling back to local storage: %s", message)
            return self._save_locally(report)
        except (requests.exceptions.JSONDecodeError, json.JSONDecodeError) as e:
            logger.error("API returned an unreadable response: %s", e)
            return SubmissionResult.failure(
                "Invalid response from server", ErrorKind.SERVER_RESPONSE
            )
        except requests.Timeout:
            logger.warning(
                "Request timeout after %ss, falling back to local storage",
                self._client.timeout
            )
            return self._save_locally(report)
        except requests.RequestException as e:
            logger.warning("Network error, falling back to local storage: %s", e)
            return self._save_locally(report)

        report_id = body.get("id") if isinstance(body, dict) else None
        if report_id is None or report_id == "":
            logger.error("API response did not include a report id: %r", body)
            return SubmissionResult.failure(
                "Server response did not include a report id", ErrorKind.SERVER_RESPONSE
            )
        return SubmissionResult.accepted(str(report_id))

    def _save_locally(self, report: BugReport) -> SubmissionResult:
        now = self._clock()
        local_id = f"{LOCAL_ID_PREFIX}{epoch_millis(now)}"
        record = report.to_dict()
        record["id"] = local_id
        record["timestamp"] = iso_timestamp(now)
        record["status"] = PENDING_STATUS
        try:
            self._store.append(record)
        except (ReportStorageError, OSError) as e:
            logger.error("Local fallback failed: %s", e)
            return SubmissionResult.failure("Failed to save report locally", ErrorKind.STORAGE)
        logger.info("Report saved locally as %s", local_id)
        return SubmissionResult.saved_locally(local_id)
