"""Shared validation utilities"""

import re
from datetime import datetime
from typing import Optional

from dateutil import tz

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
LOCAL_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")

LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat empty form inputs as unspecified"""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email address.")

    return email


def validate_iso_date(value: Optional[str]) -> Optional[str]:
    """Validate a calendar date in YYYY-MM-DD format"""
    value = blank_to_none(value)
    if value is None:
        return None

    if not ISO_DATE_PATTERN.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format.")
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError("Date must be a valid calendar date.") from e
    return value


def validate_local_datetime(value: Optional[str]) -> Optional[str]:
    """Validate a timezone-naive datetime in YYYY-MM-DDTHH:mm format"""
    value = blank_to_none(value)
    if value is None:
        return None

    if not LOCAL_DATETIME_PATTERN.match(value):
        raise ValueError("Datetime must be in YYYY-MM-DDTHH:mm format.")
    try:
        datetime.strptime(value, LOCAL_DATETIME_FORMAT)
    except ValueError as e:
        raise ValueError("Datetime must be a valid date and time.") from e
    return value


def validate_timezone(value: str) -> str:
    """Validate an IANA timezone name such as Europe/Madrid"""
    if not value or not value.strip():
        raise ValueError("Please select a timezone.")

    value = value.strip()
    if tz.gettz(value) is None:
        raise ValueError(f"Unknown timezone: {value}")
    return value
