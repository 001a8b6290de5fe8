"""
Use case: Create a bug report from user input.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Union

from bugspot.domain.bug_report import BugReport, Severity
from bugspot.domain.result import ErrorKind, SubmissionResult
from bugspot.interfaces.repository import IBugReportRepository
from bugspot.services.context_collector import ContextCollector


@dataclass
class CreateBugReportRequest:
    """Caller-supplied fields of a new report."""
    title: str
    description: str
    severity: Union[Severity, str, None] = Severity.MEDIUM
    screenshot: Optional[str] = None
    user_email: Optional[str] = None
    steps: Sequence[str] = field(default_factory=list)
    tags: Sequence[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreateBugReportRequest':
        """Build from the widget's camelCase payload (``userEmail`` or ``email``)."""
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            severity=data.get("severity"),
            screenshot=data.get("screenshot"),
            user_email=data.get("userEmail", data.get("email")),
            steps=data.get("steps", []),
            tags=data.get("tags", []),
        )


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _check_types(request: CreateBugReportRequest) -> Optional[str]:
    """Reject untyped input that the widget form could never produce."""
    for name, value in (('title', request.title), ('description', request.description)):
        if value is not None and not isinstance(value, str):
            return f"{name.capitalize()} must be a string"
    if request.user_email is not None and not isinstance(request.user_email, str):
        return "Email must be a string"
    if request.screenshot is not None and not isinstance(request.screenshot, str):
        return "Screenshot must be a data URL string"
    if not isinstance(request.severity, (str, type(None))):
        return "Severity must be a string"
    for name, value in (('steps', request.steps), ('tags', request.tags)):
        if value is not None and not _is_string_list(value):
            return f"{name.capitalize()} must be a list of strings"
    return None


class CreateBugReportUseCase:
    """Use case for validating, enriching and submitting a bug report."""

    def __init__(
        self,
        repository: IBugReportRepository,
        collector: ContextCollector,
        include_context: bool = False
    ):
        """Initialize use case with dependencies.

        Args:
            repository: Where assembled reports are submitted
            collector: Source of environment (and runtime) context
            include_context: Attach the extended runtime context to reports
        """
        self.repository = repository
        self.collector = collector
        self.include_context = include_context

    def execute(self, request: CreateBugReportRequest) -> SubmissionResult:
        """Execute report creation.

        Args:
            request: The caller's input

        Returns:
            The repository's result, or a validation failure
        """
        type_error = _check_types(request)
        if type_error:
            return SubmissionResult.failure(type_error, ErrorKind.VALIDATION)

        title = (request.title or "").strip()
        if not title:
            return SubmissionResult.failure("Title is required", ErrorKind.VALIDATION)

        description = (request.description or "").strip()
        if not description:
            return SubmissionResult.failure("Description is required", ErrorKind.VALIDATION)

        try:
            severity = Severity.parse(request.severity)
        except ValueError as e:
            return SubmissionResult.failure(str(e), ErrorKind.VALIDATION)

        user_email = request.user_email.strip() if request.user_email is not None else None

        report = BugReport(
            title=title,
            description=description,
            severity=severity,
            screenshot=request.screenshot,
            environment=self.collector.collect_environment(),
            user_email=user_email,
            steps=tuple(request.steps or ()),
            tags=tuple(request.tags or ()),
            context=self.collector.collect_runtime_context() if self.include_context else None,
        )

        return self.repository.submit(report)

    def execute_dict(self, data: Dict[str, Any]) -> SubmissionResult:
        """Execute from an untyped dict payload."""
        if not isinstance(data, dict):
            return SubmissionResult.failure("Report payload must be an object", ErrorKind.VALIDATION)
        return self.execute(CreateBugReportRequest.from_dict(data))
