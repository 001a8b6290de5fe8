"""
Environment probe interface.

Abstracts the host application's execution environment so context
collection can be tested without a real window or display.
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from bugspot.domain.context import ViewState


class IEnvironmentProbe(ABC):
    """Read-only view of the environment the widget runs in."""

    @abstractmethod
    def user_agent(self) -> str:
        pass

    @abstractmethod
    def url(self) -> str:
        """Current location (URL or route) of the host application."""
        pass

    @abstractmethod
    def referrer(self) -> Optional[str]:
        """Previous location, or None when the current view was opened directly."""
        pass

    @abstractmethod
    def viewport_size(self) -> Optional[Tuple[int, int]]:
        pass

    @abstractmethod
    def screen_size(self) -> Optional[Tuple[int, int]]:
        pass

    @abstractmethod
    def language(self) -> Optional[str]:
        pass

    @abstractmethod
    def platform(self) -> Optional[str]:
        pass

    def view_state(self) -> Optional[ViewState]:
        """Focus/scroll state; None when the host does not report one."""
        return None
