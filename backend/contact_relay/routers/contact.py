# contact_relay/routers/contact.py
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from starlette.formparsers import FormParser

from contact_relay.core.errors import ErrorResponse, PayloadTooLarge, SubmissionError, error_response
from contact_relay.core.mailer import Mailer, MailResultKind, OutgoingMail
from contact_relay.core.settings import Settings
from contact_relay.lib.compose import format_subject, parse_submission, render_html, render_text

router = APIRouter(tags=["contact"])
log = logging.getLogger("uvicorn.error")

AUTH_FAILED_MESSAGE = "Authentication failed. Please check email credentials."
SEND_FAILED_MESSAGE = "Email sending failed. Please try again later."


class SendResponse(BaseModel):
    success: bool
    message: str


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def _read_limited(request: Request, max_bytes: int) -> bytes:
    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            raise PayloadTooLarge()
        chunks.append(chunk)
    return b"".join(chunks)


async def _replay(body: bytes):
    yield body
    # FormParser finalizes on the empty chunk
    yield b""


async def read_payload(request: Request, max_bytes: int) -> Dict[str, Any]:
    """Return the request body as a dict.

    JSON and url-encoded forms are understood; anything else (or a JSON value
    that isn't an object) is an empty submission.
    """
    body = await _read_limited(request, max_bytes)
    if not body:
        return {}

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/x-www-form-urlencoded"):
        form = await FormParser(request.headers, _replay(body)).parse()
        return {k: v for k, v in form.items()}
    if "json" not in content_type:
        return {}

    try:
        data = json.loads(body)
    except ValueError:
        raise SubmissionError("Invalid request body.")
    return data if isinstance(data, dict) else {}


@router.post(
    "/send",
    response_model=SendResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_contact_email(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
):
    data = await read_payload(request, settings.max_body_bytes)
    sub = parse_submission(data)

    submitted_at = datetime.now(timezone.utc)
    mail = OutgoingMail(
        to=settings.recipient or "",
        subject=format_subject(settings.mail_subject_prefix, sub.subject),
        text=render_text(sub, submitted_at),
        html=render_html(sub, submitted_at, escape=settings.html_escape),
        reply_to=sub.email,
    )
    result = await mailer.send_mail(mail)

    if result.ok:
        log.info("Email sent successfully from %s", sub.email)
        return SendResponse(success=True, message="Email sent successfully")

    if result.kind is MailResultKind.AUTH_FAILURE:
        log.error("Failed to send email: SMTP authentication failed: %s", result.error)
        return error_response(500, AUTH_FAILED_MESSAGE)

    err = result.error
    log.error(
        "Failed to send email: %r",
        err,
        exc_info=(type(err), err, err.__traceback__) if err is not None else None,
    )
    return error_response(500, SEND_FAILED_MESSAGE)
