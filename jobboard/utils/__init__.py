"""
Utility modules for the job board.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants and enums
"""

from jobboard.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
)
from jobboard.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    ApplicationStatus,
    AuditAction,
    EducationLevel,
    InterviewStatus,
    InterviewType,
    NotificationType,
    SortField,
    SortOrder,
)
from jobboard.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "ApplicationStatus",
    "AuditAction",
    "EducationLevel",
    "InterviewStatus",
    "InterviewType",
    "NotificationType",
    "SortField",
    "SortOrder",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "log",
]
