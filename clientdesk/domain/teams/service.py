"""Team service - Membership flows spanning the roster and settings pointers"""

import logging
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud.firestore import Client

from ...exceptions import (
    InviteeNotFound,
    InviteRejected,
    NotTeamOwner,
    TeamNotFound,
    TeamOwnershipError,
    TeamUnavailable,
)
from ..settings.repository import SettingsRepository
from ..settings.schemas import Identity
from .repository import TeamRepository
from .schemas import Team, TeamMember

logger = logging.getLogger(__name__)


class TeamService:
    """
    Service layer for team membership.

    A member's settings ``teamId`` must point at the team whose roster lists
    them. Every flow that changes one also changes the other, and both writes
    go into a single Firestore write batch so they commit together.
    """

    def __init__(self, db: Client):
        self.db = db
        self.repo = TeamRepository()
        self.settings_repo = SettingsRepository()

    def get_team_for(self, identity: Identity) -> tuple[Optional[Team], bool]:
        """
        Get the caller's team and whether they own it.

        A missing team is not an error: the user simply has no team yet, and
        may create one by inviting a member.
        """
        settings = self.settings_repo.get(self.db, identity.uid)
        if not settings or not settings.teamId:
            return None, True

        try:
            team = self.repo.get(self.db, settings.teamId)
        except TeamNotFound:
            logger.warning(
                f"⚠️ User {identity.uid} points at missing team {settings.teamId}; treating as no team"
            )
            return None, True

        return team, self._is_owner(team, identity.uid)

    def lookup_invitee(self, identity: Identity, email: str) -> TeamMember:
        """Find a user to invite, rejecting yourself and existing members"""
        team, is_owner = self.get_team_for(identity)
        if not is_owner:
            raise NotTeamOwner()

        self._check_invitable(identity, team, email)

        found = self.repo.find_by_email(self.db, email)
        if not found:
            raise InviteeNotFound()
        return found

    def invite_member(self, identity: Identity, email: str) -> Team:
        """
        Add a user to the caller's team, creating the team on first invite.

        The new roster entry, the invitee's settings pointer and (for a new
        team) the team document and owner's pointer are written in one batch.
        """
        team, is_owner = self.get_team_for(identity)
        if not is_owner:
            raise NotTeamOwner()

        self._check_invitable(identity, team, email)

        invitee = self.repo.find_by_email(self.db, email)
        if not invitee:
            raise InviteeNotFound()

        if team and any(m.uid == invitee.uid for m in team.members):
            raise InviteRejected("User is already in the team.")

        invitee_settings = self.settings_repo.get(self.db, invitee.uid)
        if invitee_settings and invitee_settings.teamId and (
            team is None or invitee_settings.teamId != team.id
        ):
            raise InviteRejected("User already belongs to another team.")

        batch = self.db.batch()
        if team is None:
            team_id = self.repo.create(
                self.db,
                identity.uid,
                identity.email or "",
                identity.name or "Owner",
                batch=batch,
            )
            self.settings_repo.save(self.db, identity.uid, {"teamId": team_id}, batch=batch)
        else:
            team_id = team.id

        self.repo.add_member(self.db, team_id, invitee, batch=batch)
        self.settings_repo.save(self.db, invitee.uid, {"teamId": team_id}, batch=batch)
        self._commit(batch, f"add {invitee.uid} to team {team_id}")

        logger.info(f"✅ {invitee.email} added to team {team_id} by {identity.uid}")
        return self.repo.get(self.db, team_id)

    def remove_member(self, identity: Identity, member_uid: str) -> Team:
        """
        Remove a member from the caller's team and clear their team pointer.

        Only the owner may remove members and the owner cannot be removed.
        Removing someone who is not on the roster changes nothing.
        """
        team, is_owner = self.get_team_for(identity)
        if team is None:
            raise TeamNotFound("You don't have a team yet.")
        if not is_owner:
            raise NotTeamOwner()
        if member_uid == team.ownerId:
            raise TeamOwnershipError()

        batch = self.db.batch()
        changed = self.repo.remove_member(self.db, team.id, member_uid, batch=batch)
        if not changed:
            logger.info(f"ℹ️ {member_uid} is not on team {team.id}; nothing to remove")
            return team

        member_settings = self.settings_repo.get(self.db, member_uid)
        if member_settings and member_settings.teamId == team.id:
            self.settings_repo.save(self.db, member_uid, {"teamId": None}, batch=batch)
        self._commit(batch, f"remove {member_uid} from team {team.id}")

        # Client records keep the teamId captured when they were created
        logger.info(
            f"✅ {member_uid} removed from team {team.id}; their existing clients stay with the team"
        )
        return self.repo.get(self.db, team.id)

    def _check_invitable(self, identity: Identity, team: Optional[Team], email: str) -> None:
        if identity.email and email.lower() == identity.email.lower():
            raise InviteRejected("You cannot add yourself to the team.")
        if team and any(m.email.lower() == email.lower() for m in team.members):
            raise InviteRejected("User is already in the team.")

    @staticmethod
    def _is_owner(team: Team, uid: str) -> bool:
        return any(m.uid == uid and m.role == "owner" for m in team.members)

    @staticmethod
    def _commit(batch, action: str) -> None:
        try:
            batch.commit()
        except NotFound as e:
            logger.error(f"❌ Team document missing during batch ({action}): {e}")
            raise TeamNotFound() from e
        except GoogleAPIError as e:
            logger.error(f"❌ Batch write failed ({action}): {e}")
            raise TeamUnavailable() from e
