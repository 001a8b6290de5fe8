"""
Structured logging for submission events.

Emits one JSON object per line: UTC timestamp, level, event name, logger
name, plus every ``extra`` field passed with the record.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bugspot.services.clock import iso_timestamp

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted string
        """
        log_data: Dict[str, Any] = {
            "timestamp": iso_timestamp(datetime.fromtimestamp(record.created, timezone.utc)),
            "level": record.levelname,
            "event": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extras = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        log_data.update((k, _json_safe(v)) for k, v in extras.items())
        return json.dumps(log_data)


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: Optional[str] = None
) -> logging.Logger:
    """Configure the ``bugspot`` logger hierarchy.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines via StructuredFormatter
        log_file: Also write to this file

    Returns:
        The configured ``bugspot`` logger
    """
    root = logging.getLogger("bugspot")
    root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    root.handlers = []

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


class SubmissionLogger:
    """Structured logger wrapper for widget events."""

    def __init__(self, name: str = "bugspot.events"):
        self._logger = logging.getLogger(name)

    def log_submission(
        self,
        success: bool,
        duration_ms: float,
        severity: str,
        report_id: Optional[str] = None,
        stored_locally: bool = False,
        error: Optional[str] = None,
        error_kind: Optional[str] = None
    ) -> None:
        """Log the outcome of one submit call.

        Args:
            success: Whether the report was recorded
            duration_ms: Wall time of the submit call
            severity: Report severity
            report_id: Server or local id
            stored_locally: Whether the local fallback was used
            error: Error message if failed
            error_kind: ErrorKind value if failed
        """
        level = logging.INFO if success else logging.ERROR
        self._logger.log(
            level,
            "bug_report_submitted" if success else "bug_report_failed",
            extra={
                "report_id": report_id,
                "severity": severity,
                "duration_ms": round(duration_ms, 2),
                "stored_locally": stored_locally,
                "success": success,
                "error": error,
                "error_kind": error_kind,
            }
        )

    def log_screenshot(
        self,
        duration_ms: float,
        width: int,
        height: int,
        is_placeholder: bool
    ) -> None:
        level = logging.WARNING if is_placeholder else logging.DEBUG
        self._logger.log(
            level,
            "screenshot_captured",
            extra={
                "duration_ms": round(duration_ms, 2),
                "width": width,
                "height": height,
                "is_placeholder": is_placeholder,
            }
        )
