"""Domain model for bug reports submitted through the widget."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .context import RuntimeContext


PENDING_STATUS = "pending"
LOCAL_ID_PREFIX = "local_"


class Severity(str, Enum):
    """Severity levels accepted by the widget."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Coerce a string (or None) into a Severity.

        Raises:
            ValueError: If the value is not one of the known levels
        """
        if value is None or value == "":
            return cls.MEDIUM
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(f"Severity must be one of: {allowed}") from None


@dataclass(frozen=True)
class EnvironmentData:
    """Snapshot of the host environment at report time."""
    user_agent: str
    url: str
    referrer: str
    viewport: str
    screen: str
    timestamp: str
    language: str
    platform: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "userAgent": self.user_agent,
            "url": self.url,
            "referrer": self.referrer,
            "viewport": self.viewport,
            "screen": self.screen,
            "timestamp": self.timestamp,
            "language": self.language,
            "platform": self.platform,
        }


@dataclass(frozen=True)
class BugReport:
    """Domain entity representing a single user-submitted bug report."""
    title: str
    description: str
    environment: EnvironmentData
    severity: Severity = Severity.MEDIUM
    screenshot: Optional[str] = None
    user_email: Optional[str] = None
    steps: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)
    context: Optional[RuntimeContext] = None
    id: Optional[str] = None

    @property
    def user_agent(self) -> str:
        return self.environment.user_agent

    @property
    def url(self) -> str:
        return self.environment.url

    def validate(self) -> Optional[str]:
        """Return the first validation error, or None if the report is valid."""
        if not self.title or not self.title.strip():
            return "Title is required"
        if not self.description or not self.description.strip():
            return "Description is required"
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON body the BugSpot API expects."""
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "severity": self.severity.value,
            "environment": self.environment.to_dict(),
            "userAgent": self.user_agent,
            "url": self.url,
            "steps": list(self.steps),
            "tags": list(self.tags),
        }
        if self.id is not None:
            data["id"] = self.id
        if self.screenshot is not None:
            data["screenshot"] = self.screenshot
        if self.user_email is not None:
            data["userEmail"] = self.user_email
        if self.context is not None:
            data["context"] = self.context.to_dict()
        return data
