"""Client repository - Firestore operations for clients and their notes"""

import logging
from datetime import datetime, timezone
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter

from ...database import COLLECTION_CLIENTS, SUBCOLLECTION_NOTES
from ...exceptions import ClientNotFound, ClientUnavailable
from .schemas import ClientNote, ClientRecord

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Written by the repository itself, never taken from an update payload
PROTECTED_FIELDS = ("id", "userId", "teamId", "createdAt", "notes")

# Firestore rejects write batches with more operations than this
MAX_BATCH_WRITES = 500


def created_at_sort_key(record) -> datetime:
    """Sort key for createdAt; missing or malformed values sort as the epoch"""
    created_at = record.createdAt
    if not isinstance(created_at, datetime):
        return EPOCH
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def _to_record(snapshot) -> ClientRecord:
        data = snapshot.to_dict() or {}
        created_at = data.get("createdAt")
        data["createdAt"] = created_at if isinstance(created_at, datetime) else None
        data["interests"] = data.get("interests") or []
        data.pop("id", None)
        return ClientRecord(id=snapshot.id, **{k: v for k, v in data.items() if v is not None})

    @staticmethod
    def add_client(
        db: Client, user_id: str, team_id: Optional[str], **client_data
    ) -> str:
        """Create a new client stamped with its owner and team. Returns the id."""
        data = {
            **client_data,
            "userId": user_id,
            "teamId": team_id,
            "status": "Active",
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        # Firestore rejects unspecified values, so drop them instead of storing nulls
        data = {k: v for k, v in data.items() if v is not None or k == "teamId"}

        try:
            _, doc_ref = db.collection(COLLECTION_CLIENTS).add(data)
        except GoogleAPIError as e:
            logger.error(f"❌ Error adding client for {user_id}: {e}")
            raise ClientUnavailable() from e
        return doc_ref.id

    @staticmethod
    def get_client(db: Client, client_id: str) -> Optional[ClientRecord]:
        """Get a specific client by ID"""
        try:
            snapshot = db.collection(COLLECTION_CLIENTS).document(client_id).get()
        except GoogleAPIError as e:
            logger.error(f"❌ Error fetching client {client_id}: {e}")
            raise ClientUnavailable() from e

        if not snapshot.exists:
            return None
        return ClientRepository._to_record(snapshot)

    @staticmethod
    def get_clients(db: Client, user_id: str, team_id: Optional[str]) -> list[ClientRecord]:
        """
        Get every client visible to a user.

        With a team, that is every client stamped with the team; otherwise
        only the clients the user created. Results are sorted newest first
        here rather than in the query, which would need a composite index.
        """
        if team_id:
            field_filter = FieldFilter("teamId", "==", team_id)
        else:
            field_filter = FieldFilter("userId", "==", user_id)

        try:
            snapshots = db.collection(COLLECTION_CLIENTS).where(filter=field_filter).stream()
            clients = [ClientRepository._to_record(s) for s in snapshots]
        except GoogleAPIError as e:
            logger.error(f"❌ Error fetching clients for {user_id}: {e}")
            raise ClientUnavailable() from e

        clients.sort(key=created_at_sort_key, reverse=True)
        return clients

    @staticmethod
    def update_client(db: Client, client_id: str, client_data: dict) -> None:
        """
        Overwrite the editable fields of a client.

        Fields set to None are removed from the document. Ownership fields
        are stripped from the payload so they can never change.
        """
        updates = {}
        for key, value in client_data.items():
            if key in PROTECTED_FIELDS:
                continue
            updates[key] = firestore.DELETE_FIELD if value is None else value

        if not updates:
            return

        try:
            db.collection(COLLECTION_CLIENTS).document(client_id).update(updates)
        except NotFound as e:
            raise ClientNotFound() from e
        except GoogleAPIError as e:
            logger.error(f"❌ Error updating client {client_id}: {e}")
            raise ClientUnavailable() from e

    @staticmethod
    def delete_client(db: Client, client_id: str) -> int:
        """
        Delete a client together with its notes.

        The notes are enumerated and deleted in batches of at most
        MAX_BATCH_WRITES, with the client document in the last one. If a
        batch fails the client is still there, so the delete can be retried
        and no orphaned notes are left behind. Returns the number of notes
        deleted.
        """
        client_ref = db.collection(COLLECTION_CLIENTS).document(client_id)
        try:
            note_refs = [s.reference for s in client_ref.collection(SUBCOLLECTION_NOTES).stream()]
            refs = note_refs + [client_ref]
            for start in range(0, len(refs), MAX_BATCH_WRITES):
                batch = db.batch()
                for ref in refs[start : start + MAX_BATCH_WRITES]:
                    batch.delete(ref)
                batch.commit()
        except GoogleAPIError as e:
            logger.error(f"❌ Error deleting client {client_id}: {e}")
            raise ClientUnavailable() from e

        return len(note_refs)

    # Notes subcollection
    @staticmethod
    def add_note(db: Client, client_id: str, text: str, user_id: str) -> str:
        """Add a note to a client. Returns the note id."""
        try:
            notes_ref = (
                db.collection(COLLECTION_CLIENTS).document(client_id).collection(SUBCOLLECTION_NOTES)
            )
            _, doc_ref = notes_ref.add(
                {
                    "text": text,
                    "userId": user_id,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                }
            )
        except GoogleAPIError as e:
            logger.error(f"❌ Error adding note to client {client_id}: {e}")
            raise ClientUnavailable() from e
        return doc_ref.id

    @staticmethod
    def get_notes(db: Client, client_id: str) -> list[ClientNote]:
        """Get all notes for a client, newest first"""
        try:
            query = (
                db.collection(COLLECTION_CLIENTS)
                .document(client_id)
                .collection(SUBCOLLECTION_NOTES)
                .order_by("createdAt", direction=firestore.Query.DESCENDING)
            )
            notes = []
            for snapshot in query.stream():
                data = snapshot.to_dict() or {}
                notes.append(
                    ClientNote(
                        id=snapshot.id,
                        text=data.get("text", ""),
                        userId=data.get("userId", ""),
                        createdAt=data.get("createdAt"),
                    )
                )
        except GoogleAPIError as e:
            logger.error(f"❌ Error fetching notes for client {client_id}: {e}")
            raise ClientUnavailable() from e
        return notes

    @staticmethod
    def delete_note(db: Client, client_id: str, note_id: str) -> None:
        """Delete a note from a client"""
        try:
            (
                db.collection(COLLECTION_CLIENTS)
                .document(client_id)
                .collection(SUBCOLLECTION_NOTES)
                .document(note_id)
                .delete()
            )
        except GoogleAPIError as e:
            logger.error(f"❌ Error deleting note {note_id} of client {client_id}: {e}")
            raise ClientUnavailable() from e
