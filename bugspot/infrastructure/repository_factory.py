"""
Repository factory.

Creates the repository and local store implementations selected by
configuration, so callers never switch behaviour on a single object at
runtime.
"""
from typing import Callable, List, Optional

from bugspot.config import WidgetConfig
from bugspot.interfaces.repository import IBugReportRepository, ILocalReportStore

from bugspot.infrastructure.api import ApiBugReportRepository, BugSpotHttpClient
from bugspot.infrastructure.memory import InMemoryBugReportRepository
from bugspot.infrastructure.storage import InMemoryReportStore, JsonFileReportStore


class RepositoryFactory:
    """
    Factory for creating configured repository instances.

    Supports:
    - Backends: api (BugSpot API with local fallback), memory (in-process double)
    - Fallback stores: file (JSON file), memory
    """

    @staticmethod
    def create_local_store(config: WidgetConfig) -> ILocalReportStore:
        """
        Create the fallback store.

        Args:
            config: Widget configuration

        Returns:
            Local store implementation

        Raises:
            ValueError: If the storage type is not supported
        """
        storage = config.storage.lower()

        if storage == 'file':
            return JsonFileReportStore(config.storage_dir)

        elif storage == 'memory':
            return InMemoryReportStore()

        else:
            raise ValueError(
                f"Unsupported storage: '{storage}'. "
                f"Supported storage: 'file', 'memory'"
            )

    @staticmethod
    def create_repository(
        config: WidgetConfig,
        store: Optional[ILocalReportStore] = None,
        response_hooks: Optional[List[Callable]] = None
    ) -> IBugReportRepository:
        """
        Create the bug report repository.

        Args:
            config: Widget configuration
            store: Fallback store to use (created from config if omitted)
            response_hooks: requests response hooks for the HTTP client

        Returns:
            Repository implementation

        Raises:
            ValueError: If the backend is not supported
        """
        backend = config.backend.lower()

        if backend == 'api':
            client = BugSpotHttpClient(
                api_url=config.api_url,
                api_key=config.api_key,
                timeout=config.timeout,
                response_hooks=response_hooks
            )
            return ApiBugReportRepository(
                client=client,
                fallback_store=store or RepositoryFactory.create_local_store(config)
            )

        elif backend == 'memory':
            return InMemoryBugReportRepository()

        else:
            raise ValueError(
                f"Unsupported backend: '{backend}'. "
                f"Supported backends: 'api', 'memory'"
            )
