"""Feedback domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import blank_to_none


class FeedbackCreate(BaseModel):
    """Schema for submitting feedback; the sender's email comes from the session"""

    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        return blank_to_none(v)


class Feedback(BaseModel):
    id: str
    rating: int
    comment: Optional[str] = None
    userEmail: str = ""
    createdAt: Optional[datetime] = None
