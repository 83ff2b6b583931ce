"""Notification repository for the job board. Insert-only from this package."""

from typing import Optional

from bson import ObjectId
from pymongo.client_session import ClientSession

from jobboard.data.models.notification import Notification
from jobboard.utils.constants import COLLECTIONS, NotificationType
from jobboard.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification document operations."""

    @property
    def collection_name(self) -> str:
        return COLLECTIONS["notifications"]

    @property
    def model_class(self) -> type[Notification]:
        return Notification

    def notify(
        self,
        user_id: str | ObjectId,
        message: str,
        link: str,
        notification_type: NotificationType = NotificationType.APPLICATION_STATUS_UPDATE,
        session: Optional[ClientSession] = None,
    ) -> Notification:
        """Create a notification for a user."""
        notification = Notification(
            user_id=self._to_object_id(user_id),
            type=notification_type,
            message=message,
            link=link,
        )
        return self.create(notification, session=session)


# Singleton instance
_notification_repository: Optional[NotificationRepository] = None


def get_notification_repository() -> NotificationRepository:
    """Get the notification repository singleton instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
