"""Settings router - FastAPI endpoints for user settings"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client

from ...auth import get_current_identity
from ...database import get_db
from ...shared.timezones import SUPPORTED_TIMEZONES
from .repository import SettingsRepository
from .schemas import Identity, TimezoneOption, UserSettings, UserSettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=Optional[UserSettings])
async def get_settings(
    identity: Identity = Depends(get_current_identity),
    db: Client = Depends(get_db),
):
    """Get the current user's settings (null for a brand-new user)"""
    return SettingsRepository.get(db, identity.uid)


@router.put("", response_model=UserSettings)
async def update_settings(
    data: UserSettingsUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Client = Depends(get_db),
):
    """Merge the supplied fields into the current user's settings"""
    updates = data.model_dump(exclude_unset=True)
    if updates:
        SettingsRepository.save(db, identity.uid, updates)
    logger.info(f"⚙️ Settings updated for user {identity.uid}: {sorted(updates)}")

    settings = SettingsRepository.get(db, identity.uid)
    return settings or UserSettings(userId=identity.uid, **updates)


@router.get("/timezones", response_model=list[TimezoneOption])
async def list_timezones():
    """Timezones offered in the settings form"""
    return SUPPORTED_TIMEZONES
