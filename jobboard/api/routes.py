"""
Applicant routes.

``GET`` lists a company's applicants; ``PUT`` changes the status of one of
their applications.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from jobboard.core.applicants import ApplicantSearchService, parse_filter_params
from jobboard.core.exceptions import FieldError, TransitionValidationError
from jobboard.core.pipeline import StatusTransitionEngine
from jobboard.data.models.views import ApplicationSummary
from jobboard.utils.logger import get_logger

from .dependencies import get_actor_id, get_applicant_search, get_status_engine
from .schemas import StatusUpdateRequest, StatusUpdateResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/jobs", tags=["applicants"])


@router.get("/applicants")
def list_applicants(
    company_id: str,
    request: Request,
    actor_id: str = Depends(get_actor_id),
    service: ApplicantSearchService = Depends(get_applicant_search),
) -> dict[str, Any]:
    criteria = parse_filter_params(request.query_params)
    result = service.list_applicants(company_id, actor_id, criteria)
    return result.to_json_dict()


@router.put("/applicants")
def update_application_status(
    company_id: str,
    payload: StatusUpdateRequest,
    actor_id: str = Depends(get_actor_id),
    engine: StatusTransitionEngine = Depends(get_status_engine),
) -> dict[str, Any]:
    missing = [
        FieldError(alias, "is required")
        for alias, value in (("applicationId", payload.application_id), ("status", payload.status))
        if value is None or not value.strip()
    ]
    if missing:
        raise TransitionValidationError("Application ID and status are required", missing)

    application = engine.transition(
        payload.application_id,
        payload.status,
        reviewed_by=actor_id,
        rejection_reason=payload.rejection_reason,
        admin_notes=payload.admin_notes,
        interview=payload.schedule_interview,
        company_id=company_id,
    )
    logger.info(f"Application {application.id} set to {application.status} by {actor_id}")

    response = StatusUpdateResponse(
        message="Application status updated successfully",
        application=ApplicationSummary.from_application(application),
    )
    return response.model_dump(mode="json", by_alias=True)
