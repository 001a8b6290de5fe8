"""
BugSpot widget facade.

Wires the collector, screenshot service, repository and use case together
from a WidgetConfig. A host UI calls :meth:`BugSpotWidget.take_screenshot`
when its report dialog opens and :meth:`BugSpotWidget.submit` when the user
sends the form; the capture always finishes before the submit starts.
"""
import logging
import time
from dataclasses import replace
from typing import Callable, Optional, Sequence

from bugspot.application.use_cases import CreateBugReportRequest, CreateBugReportUseCase
from bugspot.config import WidgetConfig
from bugspot.domain.bug_report import Severity
from bugspot.domain.result import SubmissionResult
from bugspot.infrastructure.environment import SystemEnvironmentProbe
from bugspot.infrastructure.repository_factory import RepositoryFactory
from bugspot.interfaces.environment import IEnvironmentProbe
from bugspot.interfaces.repository import IBugReportRepository, ILocalReportStore
from bugspot.interfaces.screenshot import IScreenshotService, ScreenshotCapture
from bugspot.services.context_collector import ContextCollector
from bugspot.services.logging import SubmissionLogger
from bugspot.services.pending_reports import PendingReportService
from bugspot.services.screenshot_service import Rasterizer, ScreenshotService

logger = logging.getLogger(__name__)


class BugSpotWidget:
    """Entry point for host applications."""

    def __init__(
        self,
        config: WidgetConfig,
        probe: Optional[IEnvironmentProbe] = None,
        collector: Optional[ContextCollector] = None,
        store: Optional[ILocalReportStore] = None,
        repository: Optional[IBugReportRepository] = None,
        screenshot_service: Optional[IScreenshotService] = None,
        rasterizer: Optional[Rasterizer] = None,
        before_capture: Optional[Callable[[], None]] = None,
        after_capture: Optional[Callable[[], None]] = None
    ):
        """Initialize the widget.

        Args:
            config: Widget configuration
            probe: Host environment probe (default: SystemEnvironmentProbe)
            collector: Context collector (default: one built on the probe)
            store: Fallback store (default: from config)
            repository: Repository (default: from config)
            screenshot_service: Screenshot service (default: Pillow based)
            rasterizer: Image source for the default screenshot service
            before_capture: Called before a capture, e.g. to hide the dialog
            after_capture: Called after a capture, e.g. to show it again
        """
        self.config = config
        self.probe = probe or SystemEnvironmentProbe()
        self.collector = collector or ContextCollector(self.probe)
        self.store = store or RepositoryFactory.create_local_store(config)
        self.repository = repository or RepositoryFactory.create_repository(
            config,
            store=self.store,
            response_hooks=[self.collector.response_hook]
        )
        self.screenshots = screenshot_service or ScreenshotService(
            probe=self.probe, rasterizer=rasterizer
        )
        self.use_case = CreateBugReportUseCase(
            self.repository, self.collector, include_context=config.collect_context
        )
        self.pending = PendingReportService(self.store)
        self.last_capture: Optional[ScreenshotCapture] = None
        self._before_capture = before_capture
        self._after_capture = after_capture
        self._events = SubmissionLogger()

    def take_screenshot(self) -> Optional[ScreenshotCapture]:
        """Capture the current view (call again to retake).

        Returns:
            The capture (without preview when previews are off), or None
            when screenshots are disabled
        """
        if not self.config.enable_screenshot:
            return None
        started = time.perf_counter()
        if self._before_capture:
            self._before_capture()
        try:
            capture = self.screenshots.capture_with_preview()
        finally:
            if self._after_capture:
                self._after_capture()
        self._events.log_screenshot(
            duration_ms=(time.perf_counter() - started) * 1000,
            width=capture.width,
            height=capture.height,
            is_placeholder=capture.is_placeholder,
        )
        if not self.config.show_preview:
            capture = replace(capture, preview=None)
        self.last_capture = capture
        return capture

    def submit(
        self,
        title: str,
        description: str,
        severity: Severity = Severity.MEDIUM,
        email: Optional[str] = None,
        screenshot: Optional[str] = None,
        steps: Optional[Sequence[str]] = None,
        tags: Optional[Sequence[str]] = None,
        capture_screenshot: bool = False
    ) -> SubmissionResult:
        """Submit a report.

        Args:
            title: Report title
            description: Report description
            severity: Severity (default medium)
            email: Reporter's email
            screenshot: Data URL captured earlier (e.g. via take_screenshot)
            steps: Reproduction steps
            tags: Free-form tags
            capture_screenshot: Capture now if no screenshot was given

        Returns:
            SubmissionResult
        """
        if screenshot is None and capture_screenshot:
            capture = self.take_screenshot()
            screenshot = capture.data_url if capture else None

        started = time.perf_counter()
        result = self.use_case.execute(CreateBugReportRequest(
            title=title,
            description=description,
            severity=severity,
            screenshot=screenshot,
            user_email=email,
            steps=list(steps or []),
            tags=list(tags or []),
        ))
        self._events.log_submission(
            success=result.success,
            duration_ms=(time.perf_counter() - started) * 1000,
            severity=str(getattr(severity, "value", severity) or Severity.MEDIUM.value),
            report_id=result.id,
            stored_locally=result.stored_locally,
            error=result.error,
            error_kind=result.error_kind.value if result.error_kind else None,
        )
        if not result.success:
            logger.error("Failed to submit bug report: %s", result.error)
        return result

    def close(self) -> None:
        """Detach the collector's exception hooks."""
        self.collector.close()
