"""
Local stores for fallback records.
"""
from .json_file_store import JsonFileReportStore, STORAGE_KEY
from .memory_store import InMemoryReportStore

__all__ = ['JsonFileReportStore', 'InMemoryReportStore', 'STORAGE_KEY']
