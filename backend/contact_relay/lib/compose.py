import re
from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel

from contact_relay.core.errors import SubmissionError
from contact_relay.lib.sanitize import escape_html, is_valid_email, sanitize_input

REQUIRED_FIELDS = ("name", "email", "subject", "message")
MISSING_FIELDS_MESSAGE = "Missing required fields: name, email, subject, and message are required."
INVALID_EMAIL_MESSAGE = "Invalid email format."

_LINE_BREAKS_RE = re.compile(r"[\r\n]+")


class Submission(BaseModel):
    name: str
    email: str
    phone: str = ""
    subject: str
    message: str


def _is_blank(value: Any) -> bool:
    # empty lists and dicts count as present; they sanitize to ""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and (value == 0 or value != value)


def parse_submission(data: Dict[str, Any]) -> Submission:
    """Validate a raw request body and return the sanitized submission."""
    if any(_is_blank(data.get(field)) for field in REQUIRED_FIELDS):
        raise SubmissionError(MISSING_FIELDS_MESSAGE)
    if not is_valid_email(data["email"]):
        raise SubmissionError(INVALID_EMAIL_MESSAGE)

    phone = data.get("phone")
    return Submission(
        name=sanitize_input(data["name"]),
        email=sanitize_input(data["email"]),
        phone=sanitize_input(phone) if phone else "",
        subject=sanitize_input(data["subject"]),
        message=sanitize_input(data["message"]),
    )


def _format_timestamp(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def render_text(sub: Submission, submitted_at: datetime) -> str:
    return (
        "Contact Form Submission\n"
        "\n"
        f"Name: {sub.name}\n"
        f"Email: {sub.email}\n"
        f"Phone: {sub.phone or 'Not provided'}\n"
        f"Subject: {sub.subject}\n"
        "\n"
        "Message:\n"
        f"{sub.message}\n"
        "\n"
        "---\n"
        f"Submitted at: {_format_timestamp(submitted_at)}\n"
    )


def render_html(sub: Submission, submitted_at: datetime, escape: bool = True) -> str:
    def e(value: str) -> str:
        return escape_html(value) if escape else value

    message = e(sub.message).replace("\r\n", "\n").replace("\n", "<br>")
    return (
        "<h2>Contact Form Submission</h2>\n"
        f"<p><strong>Name:</strong> {e(sub.name)}</p>\n"
        f"<p><strong>Email:</strong> {e(sub.email)}</p>\n"
        f"<p><strong>Phone:</strong> {e(sub.phone) or 'Not provided'}</p>\n"
        f"<p><strong>Subject:</strong> {e(sub.subject)}</p>\n"
        "<h3>Message:</h3>\n"
        f"<p>{message}</p>\n"
        "<hr>\n"
        f"<p><small>Submitted at: {_format_timestamp(submitted_at)}</small></p>\n"
    )


def format_subject(prefix: str, subject: str) -> str:
    """Build a single-line subject header; line breaks become spaces."""
    subject = _LINE_BREAKS_RE.sub(" ", subject)
    return f"{prefix}: {subject}" if prefix else subject
