"""
Error taxonomy for the job board.

Every error carries a machine-checkable ``kind`` so outer layers (HTTP API,
CLI) can map it to a status code or exit message without inspecting types.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class FieldError:
    """A single invalid input field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class JobBoardError(Exception):
    """Base class for all job board errors."""

    kind: str = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "kind": self.kind}


class ValidationError(JobBoardError):
    """Malformed or out-of-range input, reported per field."""

    kind = "validation"

    def __init__(self, message: str, errors: Optional[list[FieldError]] = None) -> None:
        super().__init__(message)
        self.errors: list[FieldError] = list(errors or [])

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data


class FilterValidationError(ValidationError):
    """Invalid applicant filter parameters."""


class TransitionValidationError(ValidationError):
    """Invalid status transition request."""


class AuthenticationError(JobBoardError):
    """No acting user could be identified."""

    kind = "authentication"


class AuthorizationError(JobBoardError):
    """The acting user may not perform the operation."""

    kind = "authorization"


class NotFoundError(JobBoardError):
    """Referenced entity does not exist or is outside the acting scope."""

    kind = "not_found"


class PersistenceError(JobBoardError):
    """The store failed unexpectedly."""

    kind = "persistence"
