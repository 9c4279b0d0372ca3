import html
import re
from typing import Any

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ANGLE_BRACKETS_RE = re.compile(r"[<>]")


def is_valid_email(value: Any) -> bool:
    """Loose shape check for ``local@domain.tld``.

    Syntactic only: no DNS lookup, and plenty of RFC-invalid addresses pass.
    """
    if not isinstance(value, str):
        return False
    return _EMAIL_RE.fullmatch(value) is not None


def sanitize_input(value: Any) -> str:
    """Trim whitespace and drop every ``<`` and ``>``.

    Non-string values become ``""``. This only defangs bare tags; it leaves
    ``&`` and quotes alone, so use :func:`escape_html` before writing the
    value into markup.
    """
    if not isinstance(value, str):
        return ""
    # strip twice: removing brackets can expose new surrounding whitespace
    return _ANGLE_BRACKETS_RE.sub("", value.strip()).strip()


def escape_html(value: str) -> str:
    return html.escape(value, quote=True)
