"""Settings domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...config import DEFAULT_NOTIFICATION_HOURS, DEFAULT_TIMEZONE
from ...shared.validators import validate_email, validate_timezone

AccountType = Literal["individual", "business"]


class Identity(BaseModel):
    """The authenticated caller, as resolved from a Firebase ID token"""

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None


class UserSettings(BaseModel):
    """Per-user settings document (document id == userId)"""

    userId: str
    name: Optional[str] = None
    email: Optional[str] = None
    companyName: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    accountType: Optional[AccountType] = None
    notificationHours: float = DEFAULT_NOTIFICATION_HOURS
    teamId: Optional[str] = None


class UserSettingsUpdate(BaseModel):
    """Schema for a partial settings update; only supplied fields are written"""

    name: Optional[str] = None
    companyName: Optional[str] = None
    timezone: Optional[str] = None
    accountType: Optional[AccountType] = None
    notificationHours: Optional[float] = None

    @field_validator("companyName")
    @classmethod
    def validate_company_name(cls, v):
        if v and len(v.strip()) < 2:
            raise ValueError("Company name must be at least 2 characters.")
        return v.strip() if v else v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        if v is None:
            return v
        return validate_timezone(v)

    @field_validator("notificationHours")
    @classmethod
    def validate_notification_hours(cls, v):
        if v is not None and v < 0:
            raise ValueError("Hours can't be negative.")
        return v


class RegisterRequest(BaseModel):
    """Schema for email/password registration"""

    name: str
    email: str
    password: str
    accountType: AccountType

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

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters.")
        return v


class TimezoneOption(BaseModel):
    label: str
    value: str
    countryCode: str
