"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import (
    blank_to_none,
    validate_email,
    validate_iso_date,
    validate_local_datetime,
)

ClientStatus = Literal["Active", "Inactive"]


class Interest(str, Enum):
    """Interest tags a client can be labelled with"""

    SERVICES = "services"
    SUPPLIERS = "suppliers"
    CUSTOMERS = "customers"
    LEARNING = "learning"
    PROMOTION = "promotion"
    MENTORING = "mentoring"


INTEREST_LABELS = {
    Interest.SERVICES: "Services",
    Interest.SUPPLIERS: "Suppliers",
    Interest.CUSTOMERS: "Customers",
    Interest.LEARNING: "Learning",
    Interest.PROMOTION: "Promotion",
    Interest.MENTORING: "Mentoring",
}


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    postalCode: Optional[str] = None
    nationality: Optional[str] = None
    dateOfBirth: Optional[str] = None
    appointmentDateTime: Optional[str] = None
    interests: list[Interest] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if len(v.strip()) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v:
            raise ValueError("Invalid email address.")
        return validate_email(v)

    @field_validator("phone", "address", "postalCode", "nationality")
    @classmethod
    def validate_optional_text(cls, v):
        v = blank_to_none(v)
        return v.strip() if v else v

    @field_validator("dateOfBirth")
    @classmethod
    def validate_date_of_birth(cls, v):
        return validate_iso_date(v)

    @field_validator("appointmentDateTime")
    @classmethod
    def validate_appointment(cls, v):
        return validate_local_datetime(v)

    @field_validator("interests")
    @classmethod
    def dedupe_interests(cls, v):
        # Interests are a set; keep first-seen order
        return list(dict.fromkeys(v))


class ClientUpdate(ClientCreate):
    """
    Schema for updating a client.

    The whole editable record is replaced. Ownership fields (id, userId,
    teamId, createdAt) are not part of this schema and are ignored if sent.
    """

    status: ClientStatus = "Active"


class ClientRecord(BaseModel):
    """Client as stored, plus its document id"""

    id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    address: Optional[str] = None
    postalCode: Optional[str] = None
    nationality: Optional[str] = None
    dateOfBirth: Optional[str] = None
    appointmentDateTime: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    status: str = "Active"
    userId: str = ""
    teamId: Optional[str] = None
    createdAt: Optional[datetime] = None


class NoteCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError("Note cannot be empty.")
        return v


class ClientNote(BaseModel):
    id: str
    text: str
    userId: str
    createdAt: Optional[datetime] = None


class ContactRequest(BaseModel):
    """Schema for emailing a client"""

    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)


class CreatedResponse(BaseModel):
    id: str
