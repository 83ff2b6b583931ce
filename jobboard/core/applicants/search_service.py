"""
Applicant search service.

Runs an applicant listing end to end: ownership check, scope resolution,
the store query (which filters, orders, counts and cuts out one page) and
shaping the returned rows into views with derived fields.
"""

from datetime import date
from typing import Any, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from jobboard.core.access import CompanyAccess
from jobboard.core.exceptions import PersistenceError
from jobboard.data.models.views import (
    ApplicantListResponse,
    ApplicantView,
    ApplicationView,
    InterviewSummary,
    JobPostingSummary,
)
from jobboard.data.repositories import ApplicationRepository, get_application_repository
from jobboard.utils.config import ApplicantSettings, get_settings
from jobboard.utils.constants import AuditAction
from jobboard.utils.logger import audit_log, get_logger

from .criteria import FilterCriteria
from .derived import calculate_age, compose_location, today_utc
from .pagination import Page
from .query_builder import build_query

logger = get_logger(__name__)


def _region_name(region: Optional[dict[str, Any]]) -> Optional[str]:
    return region.get("name") if region else None


def shape_application(
    document: dict[str, Any],
    today: Optional[date] = None,
    not_available: Optional[str] = None,
) -> ApplicationView:
    """
    Turn one joined search document into an ``ApplicationView``.

    Age and location are derived here from the applicant's stored fields.
    """
    if not_available is None:
        not_available = get_settings().applicants.location_not_available

    user = document["applicant"]
    date_of_birth = user.get("date_of_birth")
    first_name = user.get("first_name")
    last_name = user.get("last_name")
    cv_url = document.get("cv_url")

    applicant = ApplicantView(
        id=user["_id"],
        name=f"{first_name or ''} {last_name or ''}".strip(),
        first_name=first_name,
        last_name=last_name,
        email=user["email"],
        profile_image=user.get("profile_image"),
        age=calculate_age(date_of_birth, today) if date_of_birth else None,
        education=user.get("last_education"),
        phone_number=user.get("phone_number"),
        location=compose_location(
            _region_name(user.get("city")),
            _region_name(user.get("province")),
            not_available,
        ),
        current_address=user.get("current_address"),
        has_cv=bool(cv_url and cv_url.strip()),
    )

    posting = document["job_posting"]
    interviews = document.get("latest_interview") or []
    latest = interviews[0] if interviews else None

    return ApplicationView(
        id=document["_id"],
        status=document["status"],
        expected_salary=document.get("expected_salary"),
        cover_letter=document.get("cover_letter"),
        cv_url=cv_url,
        test_score=document.get("test_score"),
        test_completed_at=document.get("test_completed_at"),
        rejection_reason=document.get("rejection_reason"),
        admin_notes=document.get("admin_notes"),
        created_at=document["created_at"],
        updated_at=document["updated_at"],
        reviewed_at=document.get("reviewed_at"),
        job_posting=JobPostingSummary(
            id=posting["_id"],
            title=posting["title"],
            salary_min=posting.get("salary_min"),
            salary_max=posting.get("salary_max"),
        ),
        latest_interview=InterviewSummary(
            id=latest["_id"],
            scheduled_at=latest["scheduled_at"],
            status=latest["status"],
            interview_type=latest["interview_type"],
        )
        if latest
        else None,
        applicant=applicant,
    )


class ApplicantSearchService:
    """Lists the applicants a company admin may see."""

    def __init__(
        self,
        access: Optional[CompanyAccess] = None,
        application_repository: Optional[ApplicationRepository] = None,
        settings: Optional[ApplicantSettings] = None,
    ) -> None:
        self._access = access or CompanyAccess()
        self._applications = application_repository or get_application_repository()
        self._settings = settings or get_settings().applicants

    def list_applicants(
        self,
        company_id: str | ObjectId,
        actor_id: str | ObjectId,
        criteria: FilterCriteria,
        today: Optional[date] = None,
    ) -> ApplicantListResponse:
        """
        List applicants of a company, or of one of its postings.

        Args:
            company_id: Company whose postings are searched
            actor_id: Acting user; must be the company admin
            criteria: Validated filter criteria
            today: Reference date for age computation (defaults to today, UTC)

        Raises:
            NotFoundError: Unknown company, or posting not owned by it
            AuthorizationError: Actor is not the company admin
            PersistenceError: The store query failed
        """
        company = self._access.require_admin(company_id, actor_id)
        scope = self._access.resolve_scope(company, criteria.job_posting_id)
        today = today or today_utc()
        query = build_query(criteria, scope, today)

        try:
            documents = self._applications.search(query.pipeline, collation=query.collation)
        except PyMongoError as e:
            logger.exception(f"Applicant search failed for company {company_id}")
            raise PersistenceError("Failed to fetch applicants") from e

        result = documents[0] if documents else {}
        counted = result.get("total") or [{"count": 0}]
        page = Page(
            items=[
                shape_application(doc, today, self._settings.location_not_available)
                for doc in result.get("items", [])
            ],
            page=criteria.page,
            limit=criteria.limit,
            total=counted[0]["count"],
        )

        audit_log(
            AuditAction.APPLICANTS_LISTED.value,
            {
                "company_id": str(company_id),
                "actor_id": str(actor_id),
                "total": page.total,
                "filters": criteria.applied(),
            },
            audit_type="ACCESS",
        )

        return ApplicantListResponse(
            applications=page.items,
            pagination=page.info(),
            applied_filters=criteria.applied(),
        )


# Singleton instance
_search_service: Optional[ApplicantSearchService] = None


def get_search_service() -> ApplicantSearchService:
    """Get the applicant search service singleton instance."""
    global _search_service
    if _search_service is None:
        _search_service = ApplicantSearchService()
    return _search_service
