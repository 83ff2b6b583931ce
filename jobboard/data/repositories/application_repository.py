"""
Application repository for the job board.

Provides data access for job applications, including the scoped lookups
used by the status pipeline and execution of applicant search pipelines.
"""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pymongo.client_session import ClientSession
from pymongo.collation import Collation

from jobboard.data.models.application import Application
from jobboard.utils.constants import COLLECTIONS, ApplicationStatus
from jobboard.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for job application document operations."""

    @property
    def collection_name(self) -> str:
        return COLLECTIONS["applications"]

    @property
    def model_class(self) -> type[Application]:
        return Application

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def get_in_postings(
        self,
        application_id: str | ObjectId,
        job_posting_ids: list[ObjectId],
        session: Optional[ClientSession] = None,
    ) -> Optional[Application]:
        """Get an application only if it belongs to one of the postings."""
        return self.find_one(
            {
                "_id": self._to_object_id(application_id),
                "job_posting_id": {"$in": job_posting_ids},
            },
            session=session,
        )

    def search(
        self,
        pipeline: list[dict[str, Any]],
        collation: Optional[Collation] = None,
    ) -> list[dict[str, Any]]:
        """
        Run an applicant search pipeline.

        Returns the raw pipeline output; the caller unpacks the page and
        shapes the joined documents into views.
        """
        documents = self.aggregate(pipeline, collation=collation)
        logger.debug(f"Applicant search returned {len(documents)} documents")
        return documents

    # -------------------------------------------------------------------------
    # Update Operations
    # -------------------------------------------------------------------------

    def apply_review(
        self,
        application_id: str | ObjectId,
        status: ApplicationStatus,
        reviewed_by: str | ObjectId,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
        admin_notes: Optional[str] = None,
        session: Optional[ClientSession] = None,
    ) -> Optional[Application]:
        """
        Record a review decision on an application.

        ``rejection_reason`` is written as given, so ``None`` clears it.
        ``admin_notes`` is only written when supplied.
        """
        update_data: dict[str, Any] = {
            "status": status.value,
            "rejection_reason": rejection_reason,
            "reviewed_at": reviewed_at,
            "reviewed_by": self._to_object_id(reviewed_by),
        }
        if admin_notes is not None:
            update_data["admin_notes"] = admin_notes
        return self.update(application_id, update_data, session=session)


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
