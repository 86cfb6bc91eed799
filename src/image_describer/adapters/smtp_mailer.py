"""SMTP mailer for transactional email."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from image_describer.domain.errors import MailDeliveryError
from image_describer.services.accounts import Mailer


@dataclass
class SmtpMailer(Mailer):
    """Sends plain-text email through an SMTP-over-SSL relay."""

    host: str
    port: int
    username: str
    password: str
    timeout: float = 20

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send the email in a worker thread."""
        message = EmailMessage()
        message["From"] = self.username
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(str(exc)) from exc

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.login(self.username, self.password)
            smtp.send_message(message)
