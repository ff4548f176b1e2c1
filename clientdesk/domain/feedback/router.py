"""Feedback router - FastAPI endpoints for app feedback"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from google.cloud.firestore import Client

from ...auth import get_current_identity
from ...config import ADMIN_EMAIL
from ...database import get_db
from ...exceptions import NotAdmin
from ..settings.schemas import Identity
from .schemas import Feedback, FeedbackCreate
from .service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["Feedback"])


def get_feedback_service(db: Client = Depends(get_db)) -> FeedbackService:
    """Dependency injection for FeedbackService"""
    return FeedbackService(db)


@router.post("", status_code=201)
async def submit_feedback(
    data: FeedbackCreate,
    identity: Identity = Depends(get_current_identity),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Submit a rating and optional comment"""
    if not identity.email:
        raise HTTPException(status_code=400, detail="Your account has no email address.")

    feedback_id = service.submit(data.rating, data.comment, identity.email)
    return {"id": feedback_id, "message": "Thank you for your feedback!"}


@router.get("", response_model=list[Feedback])
async def list_feedback(
    identity: Identity = Depends(get_current_identity),
    service: FeedbackService = Depends(get_feedback_service),
):
    """All feedback, newest first. Only the admin inbox owner may read it."""
    if not identity.email or identity.email.lower() != ADMIN_EMAIL.lower():
        raise NotAdmin()
    return service.list_all()
