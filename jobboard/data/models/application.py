"""
Job application models.

An application is one candidate's submission to one job posting. It is
created by the submission flow and afterwards only mutated by the status
transition engine.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from jobboard.utils.constants import ApplicationStatus

from .base import BaseDocument, PyObjectId


class Application(BaseDocument):
    """A candidate's application to a job posting."""

    # References (immutable after creation)
    job_posting_id: PyObjectId
    user_id: PyObjectId

    status: ApplicationStatus = ApplicationStatus.PENDING

    # Submission
    expected_salary: Optional[float] = Field(None, ge=0)
    cover_letter: Optional[str] = None
    cv_url: Optional[str] = None
    test_score: Optional[float] = None
    test_completed_at: Optional[datetime] = None

    # Review
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[PyObjectId] = None

    @model_validator(mode="after")
    def check_rejection_reason(self) -> "Application":
        """A rejection reason only exists on rejected applications."""
        if self.rejection_reason is not None and self.status != ApplicationStatus.REJECTED:
            raise ValueError("rejection_reason is only allowed when status is REJECTED")
        return self
