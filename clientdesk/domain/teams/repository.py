"""Team repository - Firestore operations for teams and their rosters"""

import logging
from datetime import datetime
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import firestore
from google.cloud.firestore import Client, WriteBatch
from google.cloud.firestore_v1.base_query import FieldFilter

from ...database import COLLECTION_TEAMS, COLLECTION_USER_SETTINGS
from ...exceptions import TeamNotFound, TeamUnavailable
from .schemas import Team, TeamMember

logger = logging.getLogger(__name__)


class TeamRepository:
    """Repository for the teams collection"""

    @staticmethod
    def find_by_email(db: Client, email: str) -> Optional[TeamMember]:
        """
        Look up a registered user by email for an invitation.

        The role is always ``member``; whether the user already belongs to a
        team is for the caller to check.
        """
        try:
            query = (
                db.collection(COLLECTION_USER_SETTINGS)
                .where(filter=FieldFilter("email", "==", email))
                .limit(1)
            )
            snapshots = list(query.stream())
        except GoogleAPIError as e:
            logger.error(f"❌ Error finding user by email {email}: {e}")
            raise TeamUnavailable() from e

        if not snapshots:
            return None

        user_doc = snapshots[0]
        user_data = user_doc.to_dict() or {}
        return TeamMember(
            uid=user_doc.id,
            email=user_data.get("email") or email,
            name=user_data.get("name") or "",
            role="member",
        )

    @staticmethod
    def create(
        db: Client,
        owner_uid: str,
        owner_email: str,
        owner_name: str,
        batch: Optional[WriteBatch] = None,
    ) -> str:
        """Create a team whose only member is its owner. Returns the team id."""
        team_ref = db.collection(COLLECTION_TEAMS).document()
        team_data = {
            "ownerId": owner_uid,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "members": [
                TeamMember(uid=owner_uid, email=owner_email, name=owner_name, role="owner").model_dump()
            ],
        }
        if batch is not None:
            batch.set(team_ref, team_data)
            return team_ref.id

        try:
            team_ref.set(team_data)
        except GoogleAPIError as e:
            logger.error(f"❌ Error creating team for {owner_uid}: {e}")
            raise TeamUnavailable() from e

        logger.info(f"👥 Team {team_ref.id} created by {owner_uid}")
        return team_ref.id

    @staticmethod
    def get(db: Client, team_id: str) -> Team:
        """Get a team; raises TeamNotFound if it does not exist"""
        try:
            snapshot = db.collection(COLLECTION_TEAMS).document(team_id).get()
        except GoogleAPIError as e:
            logger.error(f"❌ Error getting team {team_id}: {e}")
            raise TeamUnavailable() from e

        if not snapshot.exists:
            raise TeamNotFound()

        data = snapshot.to_dict() or {}
        created_at = data.get("createdAt")
        return Team(
            id=snapshot.id,
            ownerId=data.get("ownerId", ""),
            members=[TeamMember(**m) for m in data.get("members", [])],
            createdAt=created_at if isinstance(created_at, datetime) else None,
        )

    @staticmethod
    def add_member(
        db: Client, team_id: str, member: TeamMember, batch: Optional[WriteBatch] = None
    ) -> None:
        """
        Append a member to the roster with role ``member``.

        Neither duplicate membership nor the team's existence is checked here.
        """
        team_ref = db.collection(COLLECTION_TEAMS).document(team_id)
        new_member = member.model_copy(update={"role": "member"}).model_dump()
        update = {"members": firestore.ArrayUnion([new_member])}
        if batch is not None:
            batch.update(team_ref, update)
            return

        try:
            team_ref.update(update)
        except GoogleAPIError as e:
            logger.error(f"❌ Error adding member {member.uid} to team {team_id}: {e}")
            raise TeamUnavailable() from e

    @staticmethod
    def remove_member(
        db: Client, team_id: str, member_uid: str, batch: Optional[WriteBatch] = None
    ) -> bool:
        """
        Remove every roster entry whose uid matches.

        Entries are matched by uid on a fresh read, so edits to a member's
        name or email since they joined don't prevent removal. The exact
        entries read are removed with ArrayRemove, so members added between
        the read and the write are kept. A missing member is a no-op.
        Returns True when the roster changed.
        """
        team_ref = db.collection(COLLECTION_TEAMS).document(team_id)
        try:
            snapshot = team_ref.get()
        except GoogleAPIError as e:
            logger.error(f"❌ Error reading team {team_id}: {e}")
            raise TeamUnavailable() from e

        if not snapshot.exists:
            raise TeamNotFound()

        members = (snapshot.to_dict() or {}).get("members", [])
        matched = [m for m in members if m.get("uid") == member_uid]
        if not matched:
            return False

        update = {"members": firestore.ArrayRemove(matched)}
        if batch is not None:
            batch.update(team_ref, update)
            return True

        try:
            team_ref.update(update)
        except NotFound as e:
            raise TeamNotFound() from e
        except GoogleAPIError as e:
            logger.error(f"❌ Error removing member {member_uid} from team {team_id}: {e}")
            raise TeamUnavailable() from e
        return True
