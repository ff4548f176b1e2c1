"""Feedback repository - append-only store of ratings and comments"""

import logging
from datetime import datetime
from typing import Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore
from google.cloud.firestore import Client

from ...database import COLLECTION_FEEDBACK
from ...exceptions import FeedbackUnavailable
from .schemas import Feedback

logger = logging.getLogger(__name__)


class FeedbackRepository:
    """Repository for the feedback collection"""

    @staticmethod
    def record(db: Client, rating: int, comment: Optional[str], user_email: str) -> str:
        """Append a feedback entry. Returns its id."""
        data = {
            "rating": rating,
            "userEmail": user_email,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        if comment is not None:
            data["comment"] = comment

        try:
            _, doc_ref = db.collection(COLLECTION_FEEDBACK).add(data)
        except GoogleAPIError as e:
            logger.error(f"❌ Error adding feedback from {user_email}: {e}")
            raise FeedbackUnavailable() from e
        return doc_ref.id

    @staticmethod
    def list_all(db: Client) -> list[Feedback]:
        """All feedback, newest first. Meant for low-volume admin review."""
        try:
            query = db.collection(COLLECTION_FEEDBACK).order_by(
                "createdAt", direction=firestore.Query.DESCENDING
            )
            feedback = []
            for snapshot in query.stream():
                data = snapshot.to_dict() or {}
                created_at = data.get("createdAt")
                feedback.append(
                    Feedback(
                        id=snapshot.id,
                        rating=data.get("rating", 0),
                        comment=data.get("comment"),
                        userEmail=data.get("userEmail", ""),
                        createdAt=created_at if isinstance(created_at, datetime) else None,
                    )
                )
        except GoogleAPIError as e:
            logger.error(f"❌ Error fetching feedback: {e}")
            raise FeedbackUnavailable() from e
        return feedback
