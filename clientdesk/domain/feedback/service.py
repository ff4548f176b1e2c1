"""Feedback service - records feedback and notifies the admin inbox"""

import logging
from typing import Optional

from google.cloud.firestore import Client

from ...email_service import send_feedback_notification
from ...exceptions import NotificationUnavailable
from .repository import FeedbackRepository
from .schemas import Feedback

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: Client):
        self.db = db
        self.repo = FeedbackRepository()

    def submit(self, rating: int, comment: Optional[str], user_email: str) -> str:
        """
        Save feedback, then email the admin about it.

        The feedback is stored first. If queueing the notification fails the
        feedback stays saved and the error is raised to the caller.
        """
        feedback_id = self.repo.record(self.db, rating, comment, user_email)
        logger.info(f"⭐ Feedback {feedback_id} recorded from {user_email} ({rating}/5)")

        try:
            send_feedback_notification(self.db, user_email, rating, comment)
        except NotificationUnavailable:
            logger.warning(f"⚠️ Feedback {feedback_id} saved but admin notification was not queued")
            raise

        return feedback_id

    def list_all(self) -> list[Feedback]:
        return self.repo.list_all(self.db)
