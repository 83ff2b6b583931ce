"""Request and response bodies of the HTTP API."""

from typing import Any, Optional

from jobboard.data.models.base import CamelModel
from jobboard.data.models.views import ApplicationSummary


class StatusUpdateRequest(CamelModel):
    """
    Body of a status change.

    Everything is optional at this level so that missing and invalid
    fields are reported together by the handler and the engine.
    """

    application_id: Optional[str] = None
    status: Optional[str] = None
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    schedule_interview: Optional[dict[str, Any]] = None


class StatusUpdateResponse(CamelModel):
    message: str
    application: ApplicationSummary
