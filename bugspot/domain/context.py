"""Runtime context captured alongside a report (errors, view state, timings)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ErrorInfo:
    """An unhandled error observed while the host application was running."""
    message: str
    timestamp: str
    error_type: Optional[str] = None
    filename: Optional[str] = None
    lineno: Optional[int] = None
    stack: Optional[str] = None
    source: str = "sys"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "message": self.message,
            "timestamp": self.timestamp,
            "source": self.source,
        }
        for key, value in (
            ("type", self.error_type),
            ("filename", self.filename),
            ("lineno", self.lineno),
            ("stack", self.stack),
        ):
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class NetworkRequest:
    """A single outbound request observed by the collector."""
    url: str
    method: str
    timestamp: str
    status: Optional[int] = None
    duration: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "url": self.url,
            "method": self.method,
            "timestamp": self.timestamp,
        }
        if self.status is not None:
            data["status"] = self.status
        if self.duration is not None:
            data["duration"] = self.duration
        return data


@dataclass(frozen=True)
class ViewState:
    """Focus and scroll state of the host application's current view."""
    active_element: Optional[str] = None
    focused_element: Optional[str] = None
    scroll_position: Tuple[int, int] = (0, 0)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "scrollPosition": {"x": self.scroll_position[0], "y": self.scroll_position[1]},
        }
        if self.active_element is not None:
            data["activeElement"] = self.active_element
        if self.focused_element is not None:
            data["focusedElement"] = self.focused_element
        return data


@dataclass(frozen=True)
class PerformanceMetrics:
    """Timing and memory metrics. Optional fields are omitted when unknown."""
    load_time: float = 0.0
    dom_content_loaded: float = 0.0
    first_paint: Optional[float] = None
    memory_usage: Optional[Dict[str, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "loadTime": self.load_time,
            "domContentLoaded": self.dom_content_loaded,
        }
        if self.first_paint is not None:
            data["firstPaint"] = self.first_paint
        if self.memory_usage is not None:
            data["memoryUsage"] = dict(self.memory_usage)
        return data


@dataclass(frozen=True)
class RuntimeContext:
    """Extended context: recent errors, view state, performance, network log."""
    errors: List[ErrorInfo] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    network: List[NetworkRequest] = field(default_factory=list)
    view_state: Optional[ViewState] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "errors": [e.to_dict() for e in self.errors],
            "performance": self.performance.to_dict(),
            "network": [n.to_dict() for n in self.network],
        }
        if self.view_state is not None:
            data["domState"] = self.view_state.to_dict()
        return data
