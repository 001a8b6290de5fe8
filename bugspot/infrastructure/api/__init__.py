"""
BugSpot API infrastructure.
"""
from .http_client import BugSpotHttpClient
from .bug_report_api import ApiBugReportRepository, NON_FALLBACK_STATUSES

__all__ = ['BugSpotHttpClient', 'ApiBugReportRepository', 'NON_FALLBACK_STATUSES']
