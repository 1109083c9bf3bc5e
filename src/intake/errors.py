"""Domain errors for the intake portal.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer should answer with.  Domain code raises these; only the API exception
handler translates them into responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single violated constraint, addressed by dotted field path."""

    field: str
    reason: str

    def as_dict(self) -> Dict[str, str]:
        return {"field": self.field, "reason": self.reason}


class IntakeError(Exception):
    """Base exception for all portal errors."""

    code: str = "INTAKE_ERROR"
    http_status: int = 500

    def __init__(self, message: str = "", *, code: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        if code:
            self.code = code

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class NotFound(IntakeError):
    code = "NOT_FOUND"
    http_status = 404


class ProjectNotFound(NotFound):
    code = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class FileNotFound(NotFound):
    code = "FILE_NOT_FOUND"

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class StepValidationError(IntakeError):
    """Payload failed validation; ``errors`` lists every violated field."""

    code = "VALIDATION_ERROR"
    http_status = 422

    def __init__(self, errors: List[FieldError], message: str = ""):
        super().__init__(message or f"{len(errors)} field(s) failed validation")
        self.errors = list(errors)

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["errors"] = [e.as_dict() for e in self.errors]
        return detail


class FileTooLarge(IntakeError):
    code = "FILE_TOO_LARGE"
    http_status = 413

    def __init__(self, size: int, limit: int):
        super().__init__(f"File too large: {size} bytes (limit {limit} bytes)")
        self.size = size
        self.limit = limit


class UnsupportedFileType(IntakeError):
    code = "UNSUPPORTED_FILE_TYPE"
    http_status = 415

    def __init__(self, filename: str, content_type: str):
        super().__init__(f"Unsupported file type: {filename} ({content_type})")
        self.filename = filename
        self.content_type = content_type


class StatusConflict(IntakeError):
    code = "STATUS_CONFLICT"
    http_status = 409


class Unauthorized(IntakeError):
    code = "UNAUTHORIZED"
    http_status = 401
