"""Team domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email

TeamRole = Literal["owner", "member"]


class TeamMember(BaseModel):
    """One entry of a team's roster"""

    uid: str
    email: str
    name: str = ""
    role: TeamRole = "member"


class Team(BaseModel):
    id: str
    ownerId: str
    members: list[TeamMember]
    createdAt: Optional[datetime] = None


class TeamResponse(BaseModel):
    """Team view for the current user; team is null until they create or join one"""

    team: Optional[Team] = None
    isOwner: bool


class InviteRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v:
            raise ValueError("Please enter a valid email address.")
        return validate_email(v)
