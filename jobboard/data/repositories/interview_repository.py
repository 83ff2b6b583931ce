"""Interview schedule repository for the job board."""

from typing import Optional

from pymongo.client_session import ClientSession

from jobboard.data.models.interview import InterviewSchedule
from jobboard.utils.constants import COLLECTIONS
from jobboard.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class InterviewRepository(BaseRepository[InterviewSchedule]):
    """Repository for interview schedule document operations."""

    @property
    def collection_name(self) -> str:
        return COLLECTIONS["interviews"]

    @property
    def model_class(self) -> type[InterviewSchedule]:
        return InterviewSchedule

    def schedule(
        self,
        interview: InterviewSchedule,
        session: Optional[ClientSession] = None,
    ) -> InterviewSchedule:
        """Store a newly scheduled interview."""
        created = self.create(interview, session=session)
        logger.info(
            f"Interview {created.id} scheduled for application "
            f"{interview.job_application_id} at {interview.scheduled_at.isoformat()}"
        )
        return created


# Singleton instance
_interview_repository: Optional[InterviewRepository] = None


def get_interview_repository() -> InterviewRepository:
    """Get the interview repository singleton instance."""
    global _interview_repository
    if _interview_repository is None:
        _interview_repository = InterviewRepository()
    return _interview_repository
