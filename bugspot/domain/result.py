"""Typed outcome of a bug report submission."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Why a submission failed."""
    VALIDATION = "validation"
    CLIENT = "client"
    STORAGE = "storage"
    SERVER_RESPONSE = "server_response"


@dataclass(frozen=True)
class SubmissionResult:
    """Result of submit/execute: ``{success, id?, error?}``."""
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    stored_locally: bool = False

    @classmethod
    def accepted(cls, report_id: str) -> "SubmissionResult":
        return cls(success=True, id=report_id)

    @classmethod
    def saved_locally(cls, local_id: str) -> "SubmissionResult":
        return cls(success=True, id=local_id, stored_locally=True)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind) -> "SubmissionResult":
        return cls(success=False, error=error, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.id is not None:
            data["id"] = self.id
        if self.error is not None:
            data["error"] = self.error
        return data
