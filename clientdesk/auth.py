import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth

from .database import init_firebase
from .domain.settings.schemas import Identity

logger = logging.getLogger(__name__)

security = HTTPBearer()


def verify_firebase_token(token: str) -> dict:
    """Verify a Firebase ID token and return its decoded claims"""
    try:
        return firebase_auth.verify_id_token(token, app=init_firebase())
    except firebase_auth.ExpiredIdTokenError as e:
        logger.info("ℹ️ Token expired")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except (firebase_auth.InvalidIdTokenError, ValueError) as e:
        logger.warning(f"⚠️ Invalid token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token") from e
    except Exception as e:
        logger.error(f"❌ Token verification failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    """Resolve the caller's identity from the Bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    decoded_token = verify_firebase_token(token)

    uid = decoded_token.get("uid") or decoded_token.get("sub")
    if not uid:
        logger.error(f"❌ Token missing user ID claim. Claims: {list(decoded_token.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    logger.debug(f"✅ User authenticated: {decoded_token.get('email')}")
    return Identity(
        uid=uid,
        email=decoded_token.get("email"),
        name=decoded_token.get("name"),
    )
