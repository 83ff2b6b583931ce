"""
Company and job posting repositories.

Provide the ownership lookups the applicant pipeline needs: which company
an admin runs and which postings belong to it.
"""

from typing import Optional

from bson import ObjectId

from jobboard.data.models.company import Company, JobPosting
from jobboard.utils.constants import COLLECTIONS
from jobboard.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class CompanyRepository(BaseRepository[Company]):
    """Repository for company document operations."""

    @property
    def collection_name(self) -> str:
        return COLLECTIONS["companies"]

    @property
    def model_class(self) -> type[Company]:
        return Company


class JobPostingRepository(BaseRepository[JobPosting]):
    """Repository for job posting document operations."""

    @property
    def collection_name(self) -> str:
        return COLLECTIONS["job_postings"]

    @property
    def model_class(self) -> type[JobPosting]:
        return JobPosting

    def get_ids_for_company(self, company_id: str | ObjectId) -> list[ObjectId]:
        """IDs of every posting owned by a company."""
        cursor = self._get_collection().find(
            {"company_id": self._to_object_id(company_id)}, {"_id": 1}
        )
        return [doc["_id"] for doc in cursor]

    def get_for_company(
        self, job_posting_id: str | ObjectId, company_id: str | ObjectId
    ) -> Optional[JobPosting]:
        """Get a posting only if it belongs to the company."""
        return self.find_one(
            {
                "_id": self._to_object_id(job_posting_id),
                "company_id": self._to_object_id(company_id),
            }
        )


# Singleton instances
_company_repository: Optional[CompanyRepository] = None
_job_posting_repository: Optional[JobPostingRepository] = None


def get_company_repository() -> CompanyRepository:
    """Get the company repository singleton instance."""
    global _company_repository
    if _company_repository is None:
        _company_repository = CompanyRepository()
    return _company_repository


def get_job_posting_repository() -> JobPostingRepository:
    """Get the job posting repository singleton instance."""
    global _job_posting_repository
    if _job_posting_repository is None:
        _job_posting_repository = JobPostingRepository()
    return _job_posting_repository
