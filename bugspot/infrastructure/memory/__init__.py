"""
In-memory test doubles.
"""
from .memory_repository import InMemoryBugReportRepository

__all__ = ['InMemoryBugReportRepository']
