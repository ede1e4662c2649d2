"""
Notification mail transport.

``Mailer.send`` delivers a short HTML mail over SMTP.  The blocking
``smtplib`` call runs in a worker thread so that request handling is
not held up by a slow mail server.  Setting ``MAIL_HOST`` to ``skip``
turns sending off entirely.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from .config import Settings

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP mail transport configured from ``Settings``."""

    def __init__(self, settings: Settings) -> None:
        self.host = settings.mail_host
        self.port = settings.mail_port
        self.sender = settings.mail_from
        self.recipient = settings.mail_to
        self.timeout = settings.mail_timeout

    @property
    def enabled(self) -> bool:
        return bool(self.host) and self.host != "skip"

    def _build_message(self, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.send_message(message)

    async def send(self, subject: str, html_body: str) -> bool:
        """Send a mail; returns ``False`` when sending is disabled.

        Transport errors propagate to the caller.
        """
        if not self.enabled:
            logger.debug("Mail disabled, not sending '%s'", subject)
            return False
        message = self._build_message(subject, html_body)
        logger.debug("Sending mail '%s' to %s", subject, self.recipient)
        await asyncio.to_thread(self._deliver, message)
        return True
