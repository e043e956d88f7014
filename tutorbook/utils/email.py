from email.message import EmailMessage
from typing import Any

import aiosmtplib

from tutorbook.logger import get_logger
from tutorbook.settings import settings


logger = get_logger(__name__)


class Message:
    def __init__(self, title: str, content: str) -> None:
        self.title = title
        self.content = content

    def render(self, **kwargs: Any) -> tuple[str, str]:
        return self.title.format(**kwargs), self.content.format(**kwargs)

    async def send(self, recipient: str, **kwargs: Any) -> bool:
        """Send the message. Returns False if mail is not configured or delivery failed."""

        if not settings.smtp_host:
            logger.info("SMTP is not configured, not sending '%s' to %s", self.title, recipient)
            return False

        title, content = self.render(**kwargs)
        message = EmailMessage()
        message["From"] = settings.smtp_from
        message["To"] = recipient
        message["Subject"] = title
        message.set_content(content)

        try:
            await aiosmtplib.send(
                message,
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user or None,
                password=settings.smtp_password or None,
                use_tls=settings.smtp_tls,
                start_tls=settings.smtp_starttls,
            )
        except (aiosmtplib.SMTPException, OSError):
            logger.exception("Could not send '%s' to %s", title, recipient)
            return False
        return True


BOOKING_CONFIRMED = Message(
    title="Booking confirmed: {count} session(s) with {tutor}",
    content="Hi {name},\n\nyour sessions with {tutor} are confirmed:\n\n{sessions}\n\nSee you soon!\n",
)
