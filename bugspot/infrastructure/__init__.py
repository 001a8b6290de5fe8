"""
Infrastructure layer - implementations of interfaces.

Contains:
- api: BugSpot API client and repository with local fallback
- storage: local stores for fallback records
- memory: in-memory repository double
- environment: host environment probes
- repository_factory: configuration-driven repository creation
"""
from .api import ApiBugReportRepository, BugSpotHttpClient
from .storage import InMemoryReportStore, JsonFileReportStore
from .memory import InMemoryBugReportRepository
from .environment import SystemEnvironmentProbe
from .repository_factory import RepositoryFactory

__all__ = [
    # API
    'ApiBugReportRepository',
    'BugSpotHttpClient',
    # Storage
    'InMemoryReportStore',
    'JsonFileReportStore',
    # Memory
    'InMemoryBugReportRepository',
    # Environment
    'SystemEnvironmentProbe',
    # Factory
    'RepositoryFactory',
]
