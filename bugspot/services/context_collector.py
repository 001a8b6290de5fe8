"""
Context collection for bug reports.

One collector is created per application session. At construction it
installs passive exception hooks (sys, threading) and keeps bounded logs of
observed errors and outbound requests, which are attached to a report when
extended context is requested.
"""
import logging
import sys
import threading
import time
import tracemalloc
import traceback
from collections import deque
from datetime import datetime
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple

from bugspot.domain.bug_report import EnvironmentData
from bugspot.domain.context import (
    ErrorInfo,
    NetworkRequest,
    PerformanceMetrics,
    RuntimeContext,
)
from bugspot.interfaces.environment import IEnvironmentProbe
from .clock import iso_timestamp, utc_now

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
DIRECT_REFERRER = "Direct"


def _format_size(size: Optional[Tuple[int, int]]) -> str:
    if not size:
        return UNKNOWN
    width, height = size
    return f"{int(width)}x{int(height)}"


def _is_control_flow(exc_type: Any) -> bool:
    """KeyboardInterrupt/SystemExit are exits, not crashes."""
    return isinstance(exc_type, type) and issubclass(exc_type, (KeyboardInterrupt, SystemExit))


def _memory_usage() -> Optional[Dict[str, int]]:
    usage: Dict[str, int] = {}
    if not sys.platform.startswith("win"):
        import resource
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # Linux reports KiB, macOS bytes
        usage["maxRss"] = max_rss if sys.platform == "darwin" else max_rss * 1024
    if tracemalloc.is_tracing():
        current, peak = tracemalloc.get_traced_memory()
        usage["tracedCurrent"] = current
        usage["tracedPeak"] = peak
    return usage or None


class ContextCollector:
    """Collects environment facts and runtime context for one session."""

    NETWORK_LOG_SIZE = 10
    ERROR_LOG_SIZE = 50

    def __init__(
        self,
        probe: IEnvironmentProbe,
        max_network_entries: int = NETWORK_LOG_SIZE,
        max_errors: int = ERROR_LOG_SIZE,
        install_hooks: bool = True,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize the collector.

        Args:
            probe: Source of environment facts
            max_network_entries: Size of the network request ring buffer
            max_errors: Maximum number of errors kept (oldest dropped)
            install_hooks: Register sys/threading exception hooks now
            clock: Returns the current UTC datetime (injectable for tests)
        """
        self._probe = probe
        self._clock = clock or utc_now
        self._lock = Lock()
        self._errors: deque = deque(maxlen=max_errors)
        self._network: deque = deque(maxlen=max_network_entries)
        self._started = time.monotonic()
        self._ready_at: Optional[float] = None
        self._loaded_at: Optional[float] = None
        self._first_paint_at: Optional[float] = None
        self._hooks_installed = False
        self._prev_sys_excepthook: Optional[Callable] = None
        self._prev_threading_excepthook: Optional[Callable] = None
        if install_hooks:
            self.install_hooks()

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def collect_environment(self) -> EnvironmentData:
        """Snapshot environment facts. Missing values become sentinels."""
        probe = self._probe
        return EnvironmentData(
            user_agent=probe.user_agent() or UNKNOWN,
            url=probe.url() or UNKNOWN,
            referrer=probe.referrer() or DIRECT_REFERRER,
            viewport=_format_size(probe.viewport_size()),
            screen=_format_size(probe.screen_size()),
            timestamp=iso_timestamp(self._clock()),
            language=probe.language() or UNKNOWN,
            platform=probe.platform() or UNKNOWN,
        )

    def collect_runtime_context(self) -> RuntimeContext:
        """Snapshot recent errors, view state, performance and network log."""
        with self._lock:
            errors = list(self._errors)
            network = list(self._network)
        return RuntimeContext(
            errors=errors,
            performance=self.collect_performance_metrics(),
            network=network,
            view_state=self._probe.view_state(),
        )

    def collect_performance_metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            load_time=self._elapsed_ms(self._loaded_at),
            dom_content_loaded=self._elapsed_ms(self._ready_at),
            first_paint=(
                self._elapsed_ms(self._first_paint_at)
                if self._first_paint_at is not None else None
            ),
            memory_usage=_memory_usage(),
        )

    def _elapsed_ms(self, mark: Optional[float]) -> float:
        if mark is None:
            return 0.0
        return round((mark - self._started) * 1000, 3)

    # ------------------------------------------------------------------
    # Lifecycle marks
    # ------------------------------------------------------------------

    def mark_ready(self) -> None:
        """The host's UI is built (analogue of DOMContentLoaded)."""
        self._ready_at = time.monotonic()

    def mark_loaded(self) -> None:
        """The host finished loading."""
        self._loaded_at = time.monotonic()
        if self._ready_at is None:
            self._ready_at = self._loaded_at

    def mark_first_paint(self) -> None:
        if self._first_paint_at is None:
            self._first_paint_at = time.monotonic()

    # ------------------------------------------------------------------
    # Error capture
    # ------------------------------------------------------------------

    def install_hooks(self) -> None:
        """Install sys/threading exception hooks, chaining the previous ones."""
        if self._hooks_installed:
            return
        self._hooks_installed = True
        self._prev_sys_excepthook = sys.excepthook
        sys.excepthook = self._handle_sys_excepthook
        self._prev_threading_excepthook = threading.excepthook
        threading.excepthook = self._handle_threading_excepthook

    def _handle_sys_excepthook(self, exc_type, exc_value, exc_tb) -> None:
        if not _is_control_flow(exc_type):
            self._record(exc_type, exc_value, exc_tb, source="sys")
        prev = self._prev_sys_excepthook
        if callable(prev) and prev != self._handle_sys_excepthook:
            prev(exc_type, exc_value, exc_tb)

    def _handle_threading_excepthook(self, args) -> None:
        exc_type = getattr(args, "exc_type", Exception)
        if not _is_control_flow(exc_type):
            self._record(
                exc_type,
                getattr(args, "exc_value", None),
                getattr(args, "exc_traceback", None),
                source="thread",
            )
        prev = self._prev_threading_excepthook
        if callable(prev) and prev != self._handle_threading_excepthook:
            prev(args)

    def asyncio_exception_handler(self, loop, context: Dict[str, Any]) -> None:
        """Use with ``loop.set_exception_handler`` to log unhandled task errors."""
        exc = context.get("exception")
        if exc is not None:
            self._record(type(exc), exc, exc.__traceback__, source="asyncio",
                         prefix="Unhandled task exception: ")
        else:
            self._append_error(ErrorInfo(
                message=f"Unhandled task exception: {context.get('message', '')}",
                timestamp=iso_timestamp(self._clock()),
                source="asyncio",
            ))
        loop.default_exception_handler(context)

    def record_error(self, exc: BaseException, source: str = "manual") -> None:
        """Record a caught exception explicitly."""
        self._record(type(exc), exc, exc.__traceback__, source=source)

    def _record(self, exc_type, exc_value, exc_tb, source: str, prefix: str = "") -> None:
        filename = None
        lineno = None
        stack = None
        if exc_tb is not None:
            frames = traceback.extract_tb(exc_tb)
            if frames:
                filename = frames[-1].filename
                lineno = frames[-1].lineno
            stack = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        type_name = getattr(exc_type, "__name__", str(exc_type))
        text = str(exc_value) if exc_value is not None else ""
        self._append_error(ErrorInfo(
            message=f"{prefix}{text or type_name}",
            timestamp=iso_timestamp(self._clock()),
            error_type=type_name,
            filename=filename,
            lineno=lineno,
            stack=stack,
            source=source,
        ))

    def _append_error(self, info: ErrorInfo) -> None:
        with self._lock:
            self._errors.append(info)
        logger.debug("Captured %s error: %s", info.source, info.message)

    # ------------------------------------------------------------------
    # Network capture
    # ------------------------------------------------------------------

    def response_hook(self, response, *args, **kwargs) -> None:
        """``requests`` response hook: ``session.hooks['response'].append(...)``."""
        request = getattr(response, "request", None)
        elapsed = getattr(response, "elapsed", None)
        self.record_request(
            url=response.url,
            method=getattr(request, "method", None) or "GET",
            status=response.status_code,
            duration=elapsed.total_seconds() * 1000 if elapsed is not None else None,
        )

    def record_request(
        self,
        url: str,
        method: str = "GET",
        status: Optional[int] = None,
        duration: Optional[float] = None
    ) -> None:
        entry = NetworkRequest(
            url=url,
            method=method.upper(),
            timestamp=iso_timestamp(self._clock()),
            status=status,
            duration=duration,
        )
        with self._lock:
            self._network.append(entry)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop all captured errors and requests."""
        with self._lock:
            self._errors.clear()
            self._network.clear()

    def close(self) -> None:
        """Restore the exception hooks that were active before install."""
        if not self._hooks_installed:
            return
        if sys.excepthook == self._handle_sys_excepthook:
            sys.excepthook = self._prev_sys_excepthook or sys.__excepthook__
        if threading.excepthook == self._handle_threading_excepthook:
            threading.excepthook = self._prev_threading_excepthook or threading.__excepthook__
        self._hooks_installed = False

    def __enter__(self) -> "ContextCollector":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
