"""
Application status pipeline.

Validates status moves and applies them together with their side
effects (interview scheduling, applicant notification).
"""

from .transitions import (
    StatusTransitionEngine,
    build_notification_message,
    get_transition_engine,
    parse_status,
    validate_transition,
)

__all__ = [
    "StatusTransitionEngine",
    "build_notification_message",
    "get_transition_engine",
    "parse_status",
    "validate_transition",
]
