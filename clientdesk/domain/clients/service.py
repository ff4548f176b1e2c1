"""Client service - Business logic for client operations"""

import logging
from typing import Optional

from google.cloud.firestore import Client

from ...email_service import send_client_message
from ...exceptions import ClientNotFound, ClientUnavailable, SettingsUnavailable
from ..settings.repository import SettingsRepository
from ..settings.schemas import Identity
from .repository import ClientRepository
from .schemas import ClientCreate, ClientNote, ClientRecord, ClientUpdate, ContactRequest

logger = logging.getLogger(__name__)


class ClientService:
    """
    Service layer for client business logic.

    A client is visible to everyone on the team stamped on it, or only to its
    creator when it has no team. Every operation on a single client checks
    that rule against the caller's current team before touching the store.
    """

    def __init__(self, db: Client):
        self.db = db
        self.repo = ClientRepository()
        self.settings_repo = SettingsRepository()

    def _current_team_id(self, user_id: str) -> Optional[str]:
        """The caller's team pointer right now (a snapshot, not a live binding)"""
        try:
            settings = self.settings_repo.get(self.db, user_id)
        except SettingsUnavailable as e:
            raise ClientUnavailable() from e
        return settings.teamId if settings else None

    @staticmethod
    def _is_visible(client: ClientRecord, user_id: str, team_id: Optional[str]) -> bool:
        if team_id:
            return client.teamId == team_id
        return client.userId == user_id

    def get_clients(self, user_id: str) -> list[ClientRecord]:
        """Get all clients visible to a user, newest first"""
        team_id = self._current_team_id(user_id)
        return self.repo.get_clients(self.db, user_id, team_id)

    def get_client(self, client_id: str, user_id: str) -> ClientRecord:
        """Get a specific client the user can see"""
        client = self.repo.get_client(self.db, client_id)
        if not client or not self._is_visible(client, user_id, self._current_team_id(user_id)):
            raise ClientNotFound()
        return client

    def create_client(self, data: ClientCreate, user_id: str) -> str:
        """Create a new client stamped with the caller's current team"""
        team_id = self._current_team_id(user_id)
        logger.info(f"📥 Creating client for user {user_id} (team: {team_id})")
        return self.repo.add_client(self.db, user_id, team_id, **data.model_dump(mode="json"))

    def update_client(self, client_id: str, data: ClientUpdate, user_id: str) -> ClientRecord:
        """Replace the editable fields of a client"""
        client = self.get_client(client_id, user_id)

        updates = data.model_dump(mode="json")
        self.repo.update_client(self.db, client_id, updates)

        return client.model_copy(update=updates)

    def delete_client(self, client_id: str, user_id: str) -> None:
        """Delete a client and its notes"""
        self.get_client(client_id, user_id)
        notes_deleted = self.repo.delete_client(self.db, client_id)
        logger.info(f"🗑️ Client {client_id} deleted by {user_id} ({notes_deleted} notes)")

    def contact_client(self, client_id: str, data: ContactRequest, identity: Identity) -> str:
        """Queue an email from the user to a client. Returns the queue id."""
        client = self.get_client(client_id, identity.uid)
        settings = self.settings_repo.get(self.db, identity.uid)
        sender_name = (settings.companyName or settings.name) if settings else identity.name

        return send_client_message(
            self.db,
            to=client.email,
            subject=data.subject,
            message=data.message,
            sender_name=sender_name,
        )

    # Notes
    def get_notes(self, client_id: str, user_id: str) -> list[ClientNote]:
        self.get_client(client_id, user_id)
        return self.repo.get_notes(self.db, client_id)

    def add_note(self, client_id: str, text: str, user_id: str) -> str:
        self.get_client(client_id, user_id)
        return self.repo.add_note(self.db, client_id, text, user_id)

    def delete_note(self, client_id: str, note_id: str, user_id: str) -> None:
        self.get_client(client_id, user_id)
        self.repo.delete_note(self.db, client_id, note_id)
