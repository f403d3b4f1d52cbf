import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from task_manager.config import settings

logger = logging.getLogger(__name__)


class SMTPMailTransport:
    """Sends plain-text mail through the configured SMTP relay."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        sender: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        timeout: Optional[float] = None,
        enabled: Optional[bool] = None,
    ):
        self.host = host or settings.MAIL_HOST
        self.port = port or settings.MAIL_PORT
        self.sender = sender or settings.MAIL_SENDER
        self.username = username if username is not None else settings.MAIL_USERNAME
        self.password = password if password is not None else settings.MAIL_PASSWORD
        self.use_tls = settings.MAIL_USE_TLS if use_tls is None else use_tls
        self.timeout = timeout or settings.MAIL_TIMEOUT
        self.enabled = settings.MAIL_ENABLED if enabled is None else enabled

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send(self, to: str, subject: str, body: str) -> None:
        """Deliver one message. Raises smtplib/OS errors on failure."""
        message = self.build_message(to, subject, body)

        if not self.enabled:
            logger.info("Mail disabled, not sending %r to %s", subject, to)
            return

        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send_sync, message)

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
