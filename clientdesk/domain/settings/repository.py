"""Settings repository - Firestore operations for per-user settings"""

import logging
from typing import Optional

from google.api_core.exceptions import AlreadyExists, GoogleAPIError
from google.cloud.firestore import Client, WriteBatch

from ...database import COLLECTION_USER_SETTINGS
from ...exceptions import SettingsUnavailable
from .schemas import Identity, UserSettings

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Repository for the userSettings collection"""

    @staticmethod
    def get(db: Client, user_id: str) -> Optional[UserSettings]:
        """Get settings for a user; None for a brand-new user"""
        try:
            snapshot = db.collection(COLLECTION_USER_SETTINGS).document(user_id).get()
        except GoogleAPIError as e:
            logger.error(f"❌ Error getting user settings for {user_id}: {e}")
            raise SettingsUnavailable() from e

        if not snapshot.exists:
            return None

        data = snapshot.to_dict() or {}
        data.setdefault("userId", snapshot.id)
        # Drop explicit nulls so model defaults apply
        return UserSettings(**{k: v for k, v in data.items() if v is not None})

    @staticmethod
    def save(
        db: Client, user_id: str, settings: dict, batch: Optional[WriteBatch] = None
    ) -> None:
        """
        Merge-write settings for a user.

        Only the supplied keys are written; when no document exists one is
        created with exactly these keys. With ``batch`` the write is staged
        and happens when the caller commits.
        """
        doc_ref = db.collection(COLLECTION_USER_SETTINGS).document(user_id)
        if batch is not None:
            batch.set(doc_ref, settings, merge=True)
            return

        try:
            doc_ref.set(settings, merge=True)
        except GoogleAPIError as e:
            logger.error(f"❌ Error saving user settings for {user_id}: {e}")
            raise SettingsUnavailable() from e

    @staticmethod
    def ensure_exists(db: Client, identity: Identity) -> bool:
        """
        Create the settings document for a signed-in user if it is missing.

        Uses a create-only write, so an existing document is never touched.
        Returns True when a document was created.
        """
        doc_ref = db.collection(COLLECTION_USER_SETTINGS).document(identity.uid)
        try:
            doc_ref.create(
                {
                    "userId": identity.uid,
                    "name": identity.name,
                    # Lowercased so invitation lookups by email match
                    "email": identity.email.lower() if identity.email else None,
                }
            )
        except AlreadyExists:
            return False
        except GoogleAPIError as e:
            logger.error(f"❌ Error ensuring user settings for {identity.uid}: {e}")
            raise SettingsUnavailable() from e

        logger.info(f"🆕 Created settings for user {identity.uid}")
        return True
