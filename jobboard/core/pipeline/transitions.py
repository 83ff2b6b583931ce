"""
Application status transition engine.

Moving an application to a new status has up to three effects: the
application itself is updated, an interview is scheduled (only for
``INTERVIEW_SCHEDULED`` with an interview payload) and the applicant is
notified. The request is validated completely before anything is
written, and the writes share one MongoDB transaction so either all of
them happen or none does.
"""

from datetime import timezone
from typing import Any, Mapping, Optional, Union

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from jobboard.core.access import CompanyAccess
from jobboard.core.exceptions import (
    FieldError,
    NotFoundError,
    PersistenceError,
    TransitionValidationError,
)
from jobboard.data.database import DatabaseManager, get_database_manager
from jobboard.data.models.application import Application
from jobboard.data.models.base import utcnow
from jobboard.data.models.company import Company
from jobboard.data.models.interview import InterviewRequest, InterviewSchedule
from jobboard.data.repositories import (
    ApplicationRepository,
    InterviewRepository,
    JobPostingRepository,
    NotificationRepository,
    get_application_repository,
    get_interview_repository,
    get_job_posting_repository,
    get_notification_repository,
)
from jobboard.utils.config import ApplicantSettings, get_settings
from jobboard.utils.constants import (
    PIPELINE_TRANSITIONS,
    ApplicationStatus,
    AuditAction,
    InterviewType,
)
from jobboard.utils.logger import audit_log, get_logger

logger = get_logger(__name__)

InterviewPayload = Union[InterviewRequest, Mapping[str, Any]]


def validate_transition(
    current: ApplicationStatus,
    target: ApplicationStatus,
    enforce_pipeline: bool = False,
) -> None:
    """
    Check that ``current -> target`` is an allowed move.

    Re-saving the current status is always allowed. Without pipeline
    enforcement every other move is allowed too, and off-pipeline moves
    are only logged.

    Raises:
        TransitionValidationError: The move leaves the pipeline while
            enforcement is on
    """
    if current == target or target in PIPELINE_TRANSITIONS[current]:
        return

    if enforce_pipeline:
        reason = (
            f"application is already {current.label}"
            if current.is_terminal
            else f"cannot move from {current.value} to {target.value}"
        )
        raise TransitionValidationError("Invalid status transition", [FieldError("status", reason)])
    logger.warning(f"Off-pipeline status change {current.value} -> {target.value}")


def build_notification_message(job_title: str, status: ApplicationStatus) -> str:
    """Text of the status update notification sent to an applicant."""
    return f'Your application for "{job_title}" has been {status.label}.'


def parse_status(value: Union[str, ApplicationStatus]) -> ApplicationStatus:
    """Parse a target status, raising a field error for unknown values."""
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise TransitionValidationError(
            "Invalid application status value",
            [FieldError("status", f"must be one of {', '.join(s.value for s in ApplicationStatus)}")],
        ) from None


def _parse_interview(payload: InterviewPayload) -> tuple[Optional[InterviewRequest], list[FieldError]]:
    if isinstance(payload, InterviewRequest):
        request = payload
    else:
        try:
            request = InterviewRequest.model_validate(dict(payload))
        except PydanticValidationError as exc:
            return None, [
                FieldError(
                    "scheduleInterview." + ".".join(str(p) for p in err["loc"]),
                    err["msg"],
                )
                for err in exc.errors()
            ]

    errors = []
    if request.scheduled_at is None:
        errors.append(FieldError("scheduleInterview.scheduledAt", "Interview scheduled date is required"))
    if request.interview_type is not None and request.interview_type not in {
        t.value for t in InterviewType
    }:
        errors.append(FieldError("scheduleInterview.interviewType", "Invalid interview type value"))
    if request.duration is not None and request.duration <= 0:
        errors.append(FieldError("scheduleInterview.duration", "must be greater than 0"))
    return request, errors


class StatusTransitionEngine:
    """
    Applies status changes to applications.

    Collaborators default to the application-wide singletons; tests pass
    in-memory replacements.
    """

    def __init__(
        self,
        access: Optional[CompanyAccess] = None,
        application_repository: Optional[ApplicationRepository] = None,
        job_posting_repository: Optional[JobPostingRepository] = None,
        interview_repository: Optional[InterviewRepository] = None,
        notification_repository: Optional[NotificationRepository] = None,
        db_manager: Optional[DatabaseManager] = None,
        settings: Optional[ApplicantSettings] = None,
    ) -> None:
        self._access = access or CompanyAccess()
        self._applications = application_repository or get_application_repository()
        self._job_postings = job_posting_repository or get_job_posting_repository()
        self._interviews = interview_repository or get_interview_repository()
        self._notifications = notification_repository or get_notification_repository()
        self._db = db_manager or get_database_manager()
        self._settings = settings or get_settings().applicants

    def transition(
        self,
        application_id: Union[str, ObjectId],
        target_status: Union[str, ApplicationStatus],
        *,
        reviewed_by: Union[str, ObjectId],
        rejection_reason: Optional[str] = None,
        admin_notes: Optional[str] = None,
        interview: Optional[InterviewPayload] = None,
        company_id: Optional[Union[str, ObjectId]] = None,
    ) -> Application:
        """
        Move an application to ``target_status``.

        Args:
            application_id: Application to change
            target_status: New status
            reviewed_by: Acting user, recorded as the reviewer
            rejection_reason: Stored only when the target is REJECTED
            admin_notes: Replaces the stored notes when given
            interview: Interview to schedule alongside INTERVIEW_SCHEDULED
            company_id: When given, the actor must administer this company
                and the application must belong to one of its postings

        Returns:
            The updated application

        Raises:
            TransitionValidationError: Invalid status, interview payload or move
            NotFoundError: Application, posting or company not found
            AuthorizationError: Actor does not administer ``company_id``
            PersistenceError: The store failed; nothing was written
        """
        target = parse_status(target_status)

        interview_request = None
        if interview is not None:
            if target == ApplicationStatus.INTERVIEW_SCHEDULED:
                interview_request, errors = _parse_interview(interview)
                if errors:
                    raise TransitionValidationError("Invalid interview schedule", errors)
            else:
                logger.info(
                    f"Ignoring interview payload for application {application_id}: "
                    f"target status is {target.value}"
                )

        company = None
        if company_id is not None:
            company = self._access.require_admin(company_id, reviewed_by)
        application = self._load_application(application_id, company)
        current = ApplicationStatus(application.status)
        validate_transition(current, target, self._settings.enforce_status_pipeline)

        posting = self._job_postings.get_by_id(application.job_posting_id)
        if posting is None:
            raise NotFoundError("Job posting not found")

        given_reason = rejection_reason if rejection_reason and rejection_reason.strip() else None
        reason = given_reason if target == ApplicationStatus.REJECTED else None
        if given_reason and reason is None:
            logger.debug(f"Dropping rejection reason for non-rejected status {target.value}")

        try:
            with self._db.transaction() as session:
                updated = self._applications.apply_review(
                    application.id,
                    target,
                    reviewed_by=reviewed_by,
                    reviewed_at=utcnow(),
                    rejection_reason=reason,
                    admin_notes=admin_notes or None,
                    session=session,
                )
                if updated is None:
                    raise NotFoundError("Application not found")

                scheduled = None
                if interview_request is not None:
                    scheduled = self._interviews.schedule(
                        self._build_interview(application, interview_request),
                        session=session,
                    )

                self._notifications.notify(
                    application.user_id,
                    build_notification_message(posting.title, target),
                    self._settings.notification_link_template.format(
                        application_id=application.id
                    ),
                    session=session,
                )
        except PyMongoError as e:
            logger.exception(f"Status update failed for application {application.id}")
            raise PersistenceError("Failed to update application status") from e

        audit_log(
            AuditAction.APPLICATION_STATUS_CHANGED.value,
            {
                "application_id": str(application.id),
                "job_posting_id": str(application.job_posting_id),
                "from": current.value,
                "to": target.value,
                "reviewed_by": str(reviewed_by),
                "interview_id": str(scheduled.id) if scheduled else None,
            },
        )
        if scheduled is not None:
            audit_log(
                AuditAction.INTERVIEW_SCHEDULED.value,
                {
                    "interview_id": str(scheduled.id),
                    "application_id": str(application.id),
                    "scheduled_at": scheduled.scheduled_at.isoformat(),
                },
            )
        return updated

    def _load_application(
        self,
        application_id: Union[str, ObjectId],
        company: Optional[Company],
    ) -> Application:
        if company is None:
            application = self._applications.get_by_id(application_id)
        else:
            application = self._applications.get_in_postings(
                application_id,
                self._access.resolve_scope(company).job_posting_ids,
            )
        if application is None:
            raise NotFoundError("Application not found or does not belong to this company")
        return application

    def _build_interview(
        self, application: Application, request: InterviewRequest
    ) -> InterviewSchedule:
        scheduled_at = request.scheduled_at
        if scheduled_at.tzinfo is None:
            scheduled_at = scheduled_at.replace(tzinfo=timezone.utc)
        return InterviewSchedule(
            job_application_id=application.id,
            job_posting_id=application.job_posting_id,
            candidate_id=application.user_id,
            scheduled_at=scheduled_at,
            duration=request.duration or self._settings.default_interview_duration,
            interview_type=request.interview_type or InterviewType.ONLINE,
            location=request.location or None,
            notes=request.notes or None,
        )


# Singleton instance
_engine: Optional[StatusTransitionEngine] = None


def get_transition_engine() -> StatusTransitionEngine:
    """Get the status transition engine singleton instance."""
    global _engine
    if _engine is None:
        _engine = StatusTransitionEngine()
    return _engine
