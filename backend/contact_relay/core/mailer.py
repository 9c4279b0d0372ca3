# contact_relay/core/mailer.py
import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from enum import Enum
from typing import Optional, Protocol

from contact_relay.core.settings import Settings

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class OutgoingMail:
    to: str
    subject: str
    text: str
    html: str
    reply_to: Optional[str] = None


class MailResultKind(str, Enum):
    SENT = "sent"
    AUTH_FAILURE = "auth_failure"
    OTHER_FAILURE = "other_failure"


@dataclass(frozen=True)
class MailResult:
    kind: MailResultKind
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.kind is MailResultKind.SENT

    @classmethod
    def sent(cls) -> "MailResult":
        return cls(MailResultKind.SENT)

    @classmethod
    def auth_failure(cls, error: BaseException) -> "MailResult":
        return cls(MailResultKind.AUTH_FAILURE, error)

    @classmethod
    def other_failure(cls, error: BaseException) -> "MailResult":
        return cls(MailResultKind.OTHER_FAILURE, error)


class Mailer(Protocol):
    async def send_mail(self, mail: OutgoingMail) -> MailResult: ...


class MissingCredentials(Exception):
    pass


def build_message(mail: OutgoingMail, sender: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = mail.subject
    msg["From"] = sender
    msg["To"] = mail.to
    if mail.reply_to:
        msg["Reply-To"] = mail.reply_to
    # last part is the preferred rendering
    msg.attach(MIMEText(mail.text, "plain", "utf-8"))
    msg.attach(MIMEText(mail.html, "html", "utf-8"))
    return msg


class SmtpMailer:
    """Sends through one SMTP account and reports the outcome as a MailResult.

    The SMTP exchange is blocking, so it runs in a worker thread bounded by
    ``mail_timeout_seconds``. Failures are classified here and never raised.
    """

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.use_ssl = settings.smtp_use_ssl
        self.user = settings.email_user
        self.password = settings.email_pass
        self.timeout = settings.mail_timeout_seconds

    def _send_blocking(self, mail: OutgoingMail) -> None:
        if not self.user or not self.password:
            raise MissingCredentials("EMAIL_USER / EMAIL_PASS are not configured")

        msg = build_message(mail, self.user)
        context = ssl.create_default_context()
        if self.use_ssl:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls(context=context)
                smtp.login(self.user, self.password)
                smtp.send_message(msg)

    async def send_mail(self, mail: OutgoingMail) -> MailResult:
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._send_blocking, mail),
                timeout=self.timeout,
            )
        except (smtplib.SMTPAuthenticationError, MissingCredentials) as e:
            return MailResult.auth_failure(e)
        except asyncio.TimeoutError as e:
            log.warning("SMTP send to %s:%s timed out after %ss", self.host, self.port, self.timeout)
            return MailResult.other_failure(e)
        except Exception as e:
            return MailResult.other_failure(e)
        return MailResult.sent()
