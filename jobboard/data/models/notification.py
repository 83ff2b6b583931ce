"""Notification model. Written by the pipeline, read by the notification service."""

from pydantic import Field

from jobboard.utils.constants import NotificationType

from .base import BaseDocument, PyObjectId


class Notification(BaseDocument):
    """A message for a user about something that happened to them."""

    user_id: PyObjectId
    type: NotificationType = NotificationType.APPLICATION_STATUS_UPDATE
    message: str = Field(..., min_length=1)
    link: str
    is_read: bool = False
