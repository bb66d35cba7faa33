# jobbee/services/mailer.py
import logging
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from jobbee.config import Config
from jobbee.errors import MailerError

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, host: str, port: int, username: Optional[str] = None,
                 password: Optional[str] = None, sender: str = "", use_tls: bool = False):
        self.host = host
        self.port = port
        self.username = username or None
        self.password = password or None
        self.sender = sender
        self.use_tls = use_tls

    @property
    def configured(self) -> bool:
        return bool(self.host)

    async def send_email(self, recipient: str, subject: str, body: str) -> None:
        """Send a plain-text email. Skipped with a warning when SMTP is not configured."""
        if not self.configured:
            logger.warning(f"SMTP not configured, skipping email to {recipient}. "
                           "Set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD to enable email sending.")
            return

        message = MIMEText(body, "plain")
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {recipient}: {e}")
            raise MailerError(str(e)) from e

        logger.info(f"Email sent successfully to {recipient}")


def create_mailer() -> Mailer:
    return Mailer(
        host=Config.SMTP_HOST,
        port=Config.SMTP_PORT,
        username=Config.SMTP_USER,
        password=Config.SMTP_PASSWORD,
        sender=Config.SMTP_FROM,
        use_tls=Config.SMTP_USE_TLS,
    )
