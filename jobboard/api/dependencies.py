"""
Request dependencies for the HTTP API.

Each collaborator is provided through a function so tests can replace it
with ``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Header

from jobboard.core.applicants import ApplicantSearchService, get_search_service
from jobboard.core.exceptions import AuthenticationError
from jobboard.core.pipeline import StatusTransitionEngine, get_transition_engine
from jobboard.data.database import DatabaseManager, get_database_manager


def get_actor_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Acting user id, set by the upstream auth layer."""
    if x_user_id is None or not x_user_id.strip():
        raise AuthenticationError("Unauthorized")
    return x_user_id.strip()


def get_applicant_search() -> ApplicantSearchService:
    return get_search_service()


def get_status_engine() -> StatusTransitionEngine:
    return get_transition_engine()


def get_db_manager() -> DatabaseManager:
    return get_database_manager()
