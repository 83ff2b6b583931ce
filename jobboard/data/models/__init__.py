"""
Pydantic data models and schemas for the job board.

This module provides all data models used throughout the application,
including database documents, embedded models, and API views.
"""

# Base models
from .base import (
    BaseDocument,
    CamelModel,
    EmbeddedModel,
    PyObjectId,
    TimestampMixin,
    utcnow,
)

# Company and job posting models
from .company import Company, JobPosting

# User models
from .user import Region, User

# Application models
from .application import Application

# Interview models
from .interview import InterviewRequest, InterviewSchedule

# Notification models
from .notification import Notification

# Response views
from .views import (
    ApplicantListResponse,
    ApplicantView,
    ApplicationSummary,
    ApplicationView,
    InterviewSummary,
    JobPostingSummary,
    PaginationInfo,
)

__all__ = [
    # Base
    "BaseDocument",
    "CamelModel",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    "utcnow",
    # Company
    "Company",
    "JobPosting",
    # User
    "Region",
    "User",
    # Application
    "Application",
    # Interview
    "InterviewRequest",
    "InterviewSchedule",
    # Notification
    "Notification",
    # Views
    "ApplicantListResponse",
    "ApplicantView",
    "ApplicationSummary",
    "ApplicationView",
    "InterviewSummary",
    "JobPostingSummary",
    "PaginationInfo",
]
