"""
Interfaces for dependency inversion.

The use case and widget depend on these abstractions; concrete
implementations live in bugspot.infrastructure and bugspot.services.
"""
from .repository import IBugReportRepository, ILocalReportStore
from .environment import IEnvironmentProbe
from .screenshot import IScreenshotService, ScreenshotCapture

__all__ = [
    # Repository interfaces
    'IBugReportRepository',
    'ILocalReportStore',
    # Environment
    'IEnvironmentProbe',
    # Screenshot
    'IScreenshotService',
    'ScreenshotCapture',
]
