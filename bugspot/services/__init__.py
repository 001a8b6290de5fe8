"""
Services: context collection, screenshots, pending-report management, logging.
"""
from .context_collector import ContextCollector
from .screenshot_service import ScreenshotService, ScreenshotOptions
from .pending_reports import PendingReportService

__all__ = [
    'ContextCollector',
    'ScreenshotService',
    'ScreenshotOptions',
    'PendingReportService',
]
