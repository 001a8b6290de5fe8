"""
Screenshot service interface.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScreenshotCapture:
    """A captured (or placeholder) image with its preview thumbnail."""
    data_url: str
    preview: Optional[str]
    width: int
    height: int
    is_placeholder: bool = False


class IScreenshotService(ABC):
    """Interface for producing a visual capture of the current view."""

    @abstractmethod
    def capture(self) -> str:
        """Capture the current view as a data URL. Never raises."""
        pass

    @abstractmethod
    def capture_with_preview(self) -> ScreenshotCapture:
        """Capture the full image plus a small preview. Never raises."""
        pass
