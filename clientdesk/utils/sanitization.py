import html
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def text_to_html(value: Optional[str]) -> str:
    """
    Convert user-typed plain text into safe HTML paragraphs.

    Blank lines separate paragraphs; single newlines become <br />.
    """
    if not value:
        return ""

    parts = []
    for paragraph in value.strip().split("\n\n"):
        if not paragraph.strip():
            continue
        escaped = sanitize_string(paragraph.strip()).replace("\n", "<br />")
        parts.append(f"<p>{escaped}</p>")
    return "".join(parts)
