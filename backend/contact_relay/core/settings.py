# contact_relay/core/settings.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "config.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    api_title: str = Field(default="Contact Relay API", alias="API_TITLE")

    # Only this origin may call the API; credentials are allowed.
    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")

    # SMTP account used to send (and, unless overridden, receive) submissions
    email_user: Optional[str] = Field(default=None, alias="EMAIL_USER")
    email_pass: Optional[str] = Field(default=None, alias="EMAIL_PASS")
    contact_recipient: Optional[str] = Field(default=None, alias="CONTACT_RECIPIENT")

    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=465, alias="SMTP_PORT")
    # SMTP_SSL on connect when true, otherwise plain SMTP + STARTTLS
    smtp_use_ssl: bool = Field(default=True, alias="SMTP_USE_SSL")

    mail_timeout_seconds: float = Field(default=15.0, gt=0, alias="MAIL_TIMEOUT_SECONDS")
    mail_subject_prefix: str = Field(default="Customer Form Application", alias="MAIL_SUBJECT_PREFIX")

    max_body_bytes: int = Field(default=10 * 1024 * 1024, gt=0, alias="MAX_BODY_BYTES")

    # Escape &, quotes and angle brackets in the HTML body on top of the tag stripping
    html_escape: bool = Field(default=True, alias="HTML_ESCAPE")

    @property
    def recipient(self) -> Optional[str]:
        return self.contact_recipient or self.email_user


@lru_cache
def get_settings() -> Settings:
    return Settings()
