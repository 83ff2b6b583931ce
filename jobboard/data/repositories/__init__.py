"""
Database repositories for the job board.

This module provides repository classes for all database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .company_repository import (
    CompanyRepository,
    JobPostingRepository,
    get_company_repository,
    get_job_posting_repository,
)
from .application_repository import ApplicationRepository, get_application_repository
from .interview_repository import InterviewRepository, get_interview_repository
from .notification_repository import NotificationRepository, get_notification_repository

__all__ = [
    # Base
    "BaseRepository",
    # Company
    "CompanyRepository",
    "JobPostingRepository",
    "get_company_repository",
    "get_job_posting_repository",
    # Application
    "ApplicationRepository",
    "get_application_repository",
    # Interview
    "InterviewRepository",
    "get_interview_repository",
    # Notification
    "NotificationRepository",
    "get_notification_repository",
]
