import pytest
from fastapi.testclient import TestClient

from contact_relay.core.mailer import MailResult, OutgoingMail
from contact_relay.core.settings import Settings
from contact_relay.main import create_app


class FakeMailer:
    def __init__(self, result=None, exc=None):
        self.result = result or MailResult.sent()
        self.exc = exc
        self.sent = []

    async def send_mail(self, mail: OutgoingMail) -> MailResult:
        self.sent.append(mail)
        if self.exc is not None:
            raise self.exc
        return self.result


def make_settings(**overrides) -> Settings:
    values = {
        "email_user": "relay@example.com",
        "email_pass": "app-password",
        "frontend_url": "http://localhost:5173",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(settings, mailer):
    return TestClient(create_app(settings=settings, mailer=mailer))
