import logging

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore import Client

from .config import FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID

logger = logging.getLogger(__name__)

# Firestore collection names. Collections are created on first write, so these
# constants are the only schema definition.
COLLECTION_CLIENTS = "clients"
SUBCOLLECTION_NOTES = "notes"
COLLECTION_USER_SETTINGS = "userSettings"
COLLECTION_TEAMS = "teams"
COLLECTION_FEEDBACK = "feedback"
COLLECTION_MAIL = "mail"


def init_firebase() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK (only once)"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
        app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with service account credentials")
        return app

    try:
        # Try to initialize with default credentials
        cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with default credentials")
    except Exception:
        # Initialize without credentials (limited functionality)
        app = firebase_admin.initialize_app(options={"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with project ID only")
    return app


def close_firebase() -> None:
    try:
        firebase_admin.delete_app(firebase_admin.get_app())
        logger.info("Firebase Admin app deleted")
    except ValueError:
        logger.debug("Firebase Admin app was never initialized")


def get_db() -> Client:
    """FastAPI dependency returning the Firestore client"""
    return firestore.client(init_firebase())
