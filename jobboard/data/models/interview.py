"""
Interview scheduling models.

Interviews are created only as a side effect of moving an application to
``INTERVIEW_SCHEDULED``. Several may exist per application; listings show
the most recent one.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from jobboard.utils.constants import (
    DEFAULT_INTERVIEW_DURATION,
    InterviewStatus,
    InterviewType,
)

from .base import BaseDocument, CamelModel, PyObjectId


class InterviewSchedule(BaseDocument):
    """A scheduled interview for one application."""

    job_application_id: PyObjectId
    job_posting_id: PyObjectId
    candidate_id: PyObjectId

    scheduled_at: datetime
    duration: int = Field(DEFAULT_INTERVIEW_DURATION, gt=0)  # minutes
    interview_type: InterviewType = InterviewType.ONLINE
    location: Optional[str] = None  # address or meeting link
    notes: Optional[str] = None
    status: InterviewStatus = InterviewStatus.SCHEDULED


class InterviewRequest(CamelModel):
    """
    Interview payload attached to a status change.

    Values are kept loose here; the transition engine validates them
    together with the rest of the request so every problem is reported.
    """

    scheduled_at: Optional[datetime] = None
    duration: Optional[int] = None
    location: Optional[str] = None
    interview_type: Optional[str] = None
    notes: Optional[str] = None
