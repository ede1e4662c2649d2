import pytest

from catalog_api.app.core import mail
from catalog_api.app.core.config import Settings
from catalog_api.app.core.mail import Mailer


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def send_message(self, message):
        self.messages.append(message)


@pytest.mark.asyncio
async def test_skip_disables_sending():
    mailer = Mailer(Settings(mail_host="skip"))
    assert not mailer.enabled
    assert await mailer.send("Betreff", "<p>Text</p>") is False


@pytest.mark.asyncio
async def test_send(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mail.smtplib, "SMTP", FakeSMTP)
    mailer = Mailer(Settings(mail_host="localhost", mail_port=2525, mail_to="ops@acme.com"))
    assert await mailer.send("Neuer Film 1", "<strong>Neu</strong>") is True
    [smtp] = FakeSMTP.instances
    assert (smtp.host, smtp.port) == ("localhost", 2525)
    [message] = smtp.messages
    assert message["Subject"] == "Neuer Film 1"
    assert message["To"] == "ops@acme.com"
    assert message.get_content_subtype() == "html"
