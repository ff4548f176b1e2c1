"""Outbound mail queue - documents picked up by the mail delivery extension"""

import logging

from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore import Client

from ...database import COLLECTION_MAIL
from ...exceptions import NotificationUnavailable

logger = logging.getLogger(__name__)


class MailQueue:
    """Repository for the mail collection"""

    @staticmethod
    def enqueue(db: Client, to: str, subject: str, html: str) -> str:
        """
        Queue an email for delivery.

        Success means the message was accepted into the queue, not that it was
        delivered; delivery happens in an external worker.

        Returns:
            The queue document id
        """
        try:
            _, doc_ref = db.collection(COLLECTION_MAIL).add(
                {
                    "to": to,
                    "message": {
                        "subject": subject,
                        "html": html,
                    },
                }
            )
        except GoogleAPIError as e:
            logger.error(f"❌ Error queueing email to {to}: {e}")
            raise NotificationUnavailable() from e

        logger.info(f"📧 Email queued for {to}: {subject}")
        return doc_ref.id
