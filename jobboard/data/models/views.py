"""
Response views for the applicant listing.

These are read-side shapes assembled from an application, its applicant,
its job posting and its latest interview. Derived fields (age, location)
are filled in by the shaping step, never stored.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from jobboard.utils.constants import (
    ApplicationStatus,
    EducationLevel,
    InterviewStatus,
    InterviewType,
)

from .base import CamelModel, PyObjectId


class JobPostingSummary(CamelModel):
    id: PyObjectId
    title: str
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None


class InterviewSummary(CamelModel):
    id: PyObjectId
    scheduled_at: datetime
    status: InterviewStatus
    interview_type: InterviewType


class ApplicantView(CamelModel):
    """The applicant behind an application, with derived fields."""

    id: PyObjectId
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    profile_image: Optional[str] = None
    age: Optional[int] = None
    education: Optional[EducationLevel] = None
    phone_number: Optional[str] = None
    location: str
    current_address: Optional[str] = None
    has_cv: bool = False


class ApplicationView(CamelModel):
    """One row of the applicant listing."""

    id: PyObjectId
    status: ApplicationStatus
    expected_salary: Optional[float] = None
    cover_letter: Optional[str] = None
    cv_url: Optional[str] = None
    test_score: Optional[float] = None
    test_completed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    reviewed_at: Optional[datetime] = None
    job_posting: JobPostingSummary
    latest_interview: Optional[InterviewSummary] = None
    applicant: ApplicantView


class PaginationInfo(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ApplicantListResponse(CamelModel):
    """Paginated applicant listing with the filters that produced it."""

    applications: list[ApplicationView] = Field(default_factory=list)
    pagination: PaginationInfo
    applied_filters: dict[str, Any] = Field(default_factory=dict)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)


class ApplicationSummary(CamelModel):
    """An application as returned after a status change."""

    id: PyObjectId
    job_posting_id: PyObjectId
    user_id: PyObjectId
    status: ApplicationStatus
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[PyObjectId] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_application(cls, application: Any) -> "ApplicationSummary":
        return cls.model_validate(application.model_dump())
