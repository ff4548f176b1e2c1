import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
# Path to a service account JSON file; Application Default Credentials are used when unset
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH")

# Frontend base URL and CORS origins
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:9002").split(",")

# Feedback notifications are delivered to this inbox
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@clientdesk.app")

# User settings defaults
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "UTC")
DEFAULT_NOTIFICATION_HOURS = float(os.getenv("DEFAULT_NOTIFICATION_HOURS", "24"))
