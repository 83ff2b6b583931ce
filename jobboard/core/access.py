"""
Company ownership checks.

Authentication happens upstream; what is checked here is that the acting
user administers the company whose applicants are being read or changed,
and which job postings that company owns.
"""

from dataclasses import dataclass, field
from typing import Optional

from bson import ObjectId

from jobboard.core.exceptions import AuthorizationError, NotFoundError
from jobboard.data.models.company import Company
from jobboard.data.repositories import (
    CompanyRepository,
    JobPostingRepository,
    get_company_repository,
    get_job_posting_repository,
)
from jobboard.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class QueryScope:
    """The applications a listing may see: the postings of one company."""

    company_id: ObjectId
    job_posting_ids: list[ObjectId] = field(default_factory=list)


class CompanyAccess:
    """Resolves what an acting company admin may see."""

    def __init__(
        self,
        company_repository: Optional[CompanyRepository] = None,
        job_posting_repository: Optional[JobPostingRepository] = None,
    ) -> None:
        self._companies = company_repository or get_company_repository()
        self._job_postings = job_posting_repository or get_job_posting_repository()

    def require_admin(self, company_id: str | ObjectId, actor_id: str | ObjectId) -> Company:
        """
        Return the company if ``actor_id`` administers it.

        Raises:
            NotFoundError: The company does not exist
            AuthorizationError: The actor is not the company's admin
        """
        company = self._companies.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Company not found")
        if str(company.admin_id) != str(actor_id):
            logger.warning(f"User {actor_id} is not the admin of company {company_id}")
            raise AuthorizationError("Not authorized to manage this company")
        return company

    def resolve_scope(
        self, company: Company, job_posting_id: Optional[str | ObjectId] = None
    ) -> QueryScope:
        """
        Job postings a listing covers: one posting, or all of the company's.

        Raises:
            NotFoundError: ``job_posting_id`` is not one of the company's postings
        """
        if job_posting_id is not None:
            posting = self._job_postings.get_for_company(job_posting_id, company.id)
            if posting is None:
                raise NotFoundError("Job posting not found for this company")
            return QueryScope(company_id=company.id, job_posting_ids=[posting.id])

        return QueryScope(
            company_id=company.id,
            job_posting_ids=self._job_postings.get_ids_for_company(company.id),
        )
