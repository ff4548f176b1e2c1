import logging

from fastapi import APIRouter, Depends, HTTPException
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from google.cloud.firestore import Client

from ..auth import get_current_identity
from ..database import get_db, init_firebase
from ..domain.settings.repository import SettingsRepository
from ..domain.settings.schemas import Identity, RegisterRequest, UserSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserSettings, status_code=201)
async def register(data: RegisterRequest, db: Client = Depends(get_db)):
    """Create an email/password account and its initial settings"""
    try:
        user_record = firebase_auth.create_user(
            email=data.email,
            password=data.password,
            display_name=data.name,
            app=init_firebase(),
        )
    except firebase_auth.EmailAlreadyExistsError as e:
        logger.info(f"ℹ️ Registration attempted with existing email {data.email}")
        raise HTTPException(
            status_code=409,
            detail="This email address is already in use by another account.",
        ) from e
    except ValueError as e:
        # The Admin SDK raises ValueError for malformed email or weak password
        raise HTTPException(status_code=400, detail=str(e)) from e
    except firebase_exceptions.FirebaseError as e:
        logger.error(f"❌ Firebase error creating user {data.email}: {e}")
        raise HTTPException(
            status_code=400, detail="An unexpected error occurred. Please try again."
        ) from e

    settings = {
        "userId": user_record.uid,
        "accountType": data.accountType,
        "name": data.name,
        "email": data.email,
    }
    SettingsRepository.save(db, user_record.uid, settings)
    logger.info(f"✅ New user registered: {data.email}")

    return UserSettings(**settings)


@router.post("/session", response_model=UserSettings)
async def start_session(
    identity: Identity = Depends(get_current_identity),
    db: Client = Depends(get_db),
):
    """
    Called after every sign-in (including Google/GitHub).

    Makes sure the user has a settings document so they can be found by email
    for team invitations. Existing settings are never overwritten.
    """
    created = SettingsRepository.ensure_exists(db, identity)
    if created:
        logger.info(f"🆕 First sign-in for {identity.email}")

    settings = SettingsRepository.get(db, identity.uid)
    return settings or UserSettings(userId=identity.uid, name=identity.name, email=identity.email)
