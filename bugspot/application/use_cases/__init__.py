"""
Application use cases.
"""
from .create_bug_report import CreateBugReportUseCase, CreateBugReportRequest

__all__ = ['CreateBugReportUseCase', 'CreateBugReportRequest']
