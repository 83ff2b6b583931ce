"""
Application-wide constants for the job board.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "jobboard"
APP_DISPLAY_NAME: Final[str] = "Job Board Applicant Pipeline"


# =============================================================================
# Collections
# =============================================================================

COLLECTIONS: Final[dict[str, str]] = {
    "companies": "companies",
    "job_postings": "job_postings",
    "users": "users",
    "applications": "job_applications",
    "interviews": "interview_schedules",
    "notifications": "notifications",
}


# =============================================================================
# Listing Defaults
# =============================================================================

DEFAULT_PAGE: Final[int] = 1
DEFAULT_PAGE_SIZE: Final[int] = 20
MAX_PAGE_SIZE: Final[int] = 100

DEFAULT_INTERVIEW_DURATION: Final[int] = 60  # minutes

# Shown when an applicant has neither city nor province
LOCATION_NOT_AVAILABLE: Final[str] = "N/A"

NOTIFICATION_LINK_TEMPLATE: Final[str] = "/applications/{application_id}"


# =============================================================================
# Enums
# =============================================================================


class ApplicationStatus(str, Enum):
    """Status of an application in the hiring pipeline."""

    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def label(self) -> str:
        """Human-readable form used in notifications, e.g. 'interview scheduled'."""
        return self.value.lower().replace("_", " ")


TERMINAL_STATUSES: Final[frozenset[ApplicationStatus]] = frozenset(
    {
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    }
)

# Forward edges of the hiring pipeline. WITHDRAWN is added for every
# non-terminal state in PIPELINE_TRANSITIONS below.
_FORWARD_EDGES: Final[dict[ApplicationStatus, tuple[ApplicationStatus, ...]]] = {
    ApplicationStatus.PENDING: (ApplicationStatus.REVIEWED,),
    ApplicationStatus.REVIEWED: (ApplicationStatus.INTERVIEW_SCHEDULED,),
    ApplicationStatus.INTERVIEW_SCHEDULED: (ApplicationStatus.INTERVIEW_COMPLETED,),
    ApplicationStatus.INTERVIEW_COMPLETED: (
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    ),
}

PIPELINE_TRANSITIONS: Final[dict[ApplicationStatus, frozenset[ApplicationStatus]]] = {
    status: frozenset(
        _FORWARD_EDGES.get(status, ())
        + (() if status in TERMINAL_STATUSES else (ApplicationStatus.WITHDRAWN,))
    )
    for status in ApplicationStatus
}


class EducationLevel(str, Enum):
    """Highest education level an applicant reports."""

    HIGH_SCHOOL = "HIGH_SCHOOL"
    DIPLOMA = "DIPLOMA"
    BACHELOR = "BACHELOR"
    MASTER = "MASTER"
    DOCTORATE = "DOCTORATE"
    VOCATIONAL = "VOCATIONAL"
    OTHER = "OTHER"


class InterviewType(str, Enum):
    """How an interview is held."""

    ONLINE = "ONLINE"
    PHONE = "PHONE"
    IN_PERSON = "IN_PERSON"


class InterviewStatus(str, Enum):
    """Lifecycle of a scheduled interview."""

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"


class NotificationType(str, Enum):
    """Kinds of notifications written for applicants."""

    APPLICATION_STATUS_UPDATE = "APPLICATION_STATUS_UPDATE"


class SortField(str, Enum):
    """Keys the applicant list can be ordered by."""

    NAME = "name"
    EXPECTED_SALARY = "expectedSalary"
    TEST_SCORE = "testScore"
    AGE = "age"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class UserRole(str, Enum):
    """Roles a user account can hold."""

    JOB_SEEKER = "JOB_SEEKER"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    DEVELOPER = "DEVELOPER"


class AuditAction(str, Enum):
    """Types of actions that can be audited."""

    APPLICATION_STATUS_CHANGED = "application_status_changed"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    APPLICANTS_LISTED = "applicants_listed"
