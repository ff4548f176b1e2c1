"""
MJML Email Templates
Templates for messages queued through the mail collection
"""

from typing import Optional

from .utils.sanitization import sanitize_string, text_to_html

# App theme colors
THEME = {
    "primary": "#2563eb",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "star": "#f59e0b",
}


def get_base_template(title: str, preview_text: str, content_sections: str) -> str:
    """Base MJML template wrapper for all emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def star_rating(rating: int) -> str:
    """Render a 1-5 rating as filled and empty stars"""
    return "★" * rating + "☆" * (5 - rating)


def feedback_notification_template(user_email: str, rating: int, comment: Optional[str]) -> str:
    """Admin notification for a new feedback submission"""
    comment_html = text_to_html(comment) if comment and comment.strip() else "<p>No comment provided.</p>"

    content = f"""
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              New Application Feedback
            </mj-text>
            <mj-text>
              <p><strong>From:</strong> {sanitize_string(user_email)}</p>
              <p><strong>Rating:</strong> <span style="color: {THEME['star']}">{star_rating(rating)}</span> {rating} out of 5 stars</p>
              <p><strong>Comment:</strong></p>
              {comment_html}
            </mj-text>
    """
    return get_base_template(
        title="New Application Feedback",
        preview_text=f"{rating} out of 5 stars from {sanitize_string(user_email)}",
        content_sections=content,
    )


def client_message_template(subject: str, message: str, sender_name: Optional[str] = None) -> str:
    """Message from a user to one of their clients"""
    signature = ""
    if sender_name:
        signature = f"""
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 8px 0" />
            <mj-text font-size="13px" color="{THEME['text_muted']}">
              {sanitize_string(sender_name)}
            </mj-text>
        """

    content = f"""
            <mj-text>
              {text_to_html(message)}
            </mj-text>
            {signature}
    """
    return get_base_template(
        title=sanitize_string(subject),
        preview_text=sanitize_string(subject),
        content_sections=content,
    )
