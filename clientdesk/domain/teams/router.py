"""Team router - FastAPI endpoints for team membership"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from google.cloud.firestore import Client

from ...auth import get_current_identity
from ...database import get_db
from ...shared.validators import validate_email
from ..settings.schemas import Identity
from .schemas import InviteRequest, TeamMember, TeamResponse
from .service import TeamService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team", tags=["Team"])


def get_team_service(db: Client = Depends(get_db)) -> TeamService:
    """Dependency injection for TeamService"""
    return TeamService(db)


@router.get("", response_model=TeamResponse)
async def get_team(
    identity: Identity = Depends(get_current_identity),
    service: TeamService = Depends(get_team_service),
):
    """Get the current user's team (null if they have none yet)"""
    team, is_owner = service.get_team_for(identity)
    return TeamResponse(team=team, isOwner=is_owner)


@router.get("/lookup", response_model=TeamMember)
async def lookup_member(
    email: str = Query(..., min_length=3),
    identity: Identity = Depends(get_current_identity),
    service: TeamService = Depends(get_team_service),
):
    """Find a registered user by email before inviting them"""
    try:
        email = validate_email(email)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return service.lookup_invitee(identity, email)


@router.post("/members", response_model=TeamResponse, status_code=201)
async def add_member(
    data: InviteRequest,
    identity: Identity = Depends(get_current_identity),
    service: TeamService = Depends(get_team_service),
):
    """Add a user to the team, creating the team on the first invite"""
    team = service.invite_member(identity, data.email)
    return TeamResponse(team=team, isOwner=True)


@router.delete("/members/{member_uid}", response_model=TeamResponse)
async def remove_member(
    member_uid: str,
    identity: Identity = Depends(get_current_identity),
    service: TeamService = Depends(get_team_service),
):
    """Remove a member from the team"""
    team = service.remove_member(identity, member_uid)
    return TeamResponse(team=team, isOwner=True)
