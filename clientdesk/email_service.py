"""
Email service - compiles MJML templates and hands the HTML to the mail queue
"""

import logging
from typing import Optional

from google.cloud.firestore import Client
from mjml import mjml_to_html

from .config import ADMIN_EMAIL
from .domain.notifications.repository import MailQueue
from .email_templates import client_message_template, feedback_notification_template, star_rating
from .exceptions import NotificationUnavailable

logger = logging.getLogger(__name__)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise ValueError(f"Failed to compile MJML template: {str(e)}") from e


def queue_email(db: Client, to: str, subject: str, mjml_content: str) -> str:
    """Compile an MJML template and queue it for delivery"""
    try:
        html_content = compile_mjml_to_html(mjml_content)
    except ValueError as e:
        logger.error(f"❌ Email to {to} not queued, template failed to compile: {e}")
        raise NotificationUnavailable() from e
    return MailQueue.enqueue(db, to, subject, html_content)


def send_feedback_notification(
    db: Client, user_email: str, rating: int, comment: Optional[str] = None
) -> str:
    """Notify the admin inbox about new feedback"""
    return queue_email(
        db,
        to=ADMIN_EMAIL,
        subject=f"New App Feedback: {star_rating(rating)}",
        mjml_content=feedback_notification_template(user_email, rating, comment),
    )


def send_client_message(
    db: Client, to: str, subject: str, message: str, sender_name: Optional[str] = None
) -> str:
    """Send a user-written message to a client"""
    return queue_email(
        db,
        to=to,
        subject=subject,
        mjml_content=client_message_template(subject, message, sender_name),
    )
