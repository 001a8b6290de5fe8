"""
Domain entities and value objects.
"""
from .bug_report import (
    BugReport,
    EnvironmentData,
    Severity,
    PENDING_STATUS,
    LOCAL_ID_PREFIX,
)
from .context import (
    ErrorInfo,
    NetworkRequest,
    ViewState,
    PerformanceMetrics,
    RuntimeContext,
)
from .result import SubmissionResult, ErrorKind
from .errors import ReportStorageError

__all__ = [
    'BugReport',
    'EnvironmentData',
    'Severity',
    'PENDING_STATUS',
    'LOCAL_ID_PREFIX',
    'ErrorInfo',
    'NetworkRequest',
    'ViewState',
    'PerformanceMetrics',
    'RuntimeContext',
    'SubmissionResult',
    'ErrorKind',
    'ReportStorageError',
]
