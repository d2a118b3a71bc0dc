"""Notification delivery for deployment transcripts."""

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Iterable, List, Optional

from autogitpull.constants import (
    DEFAULT_MAIL_SENDER,
    DEFAULT_SMTP_HOST,
    DEFAULT_SMTP_PORT,
)
from autogitpull.models.results import NotificationMessage

logger = logging.getLogger(__name__)


class MailTransport(ABC):
    """Delivers one message to one recipient."""

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> None:
        pass


class SmtpMailTransport(MailTransport):
    """Plain SMTP delivery, one connection per message."""

    def __init__(
        self,
        host: str = DEFAULT_SMTP_HOST,
        port: int = DEFAULT_SMTP_PORT,
        sender: str = DEFAULT_MAIL_SENDER,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = False,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, recipient: str, subject: str, body: str) -> None:
        message = self.build_message(recipient, subject, body)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.starttls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)


class NotificationSink:
    """
    Collects the log lines of one deployment and mails them once at the end.

    The buffer only exists when there is someone to send it to.
    """

    def __init__(self, recipients: Iterable[str], transport: Optional[MailTransport] = None):
        """
        Initialize notification sink.

        Args:
            recipients: Email addresses to notify
            transport: Delivery mechanism (defaults to local SMTP)
        """
        self.recipients = tuple(recipients)
        self.transport = transport
        self._buffer: Optional[List[str]] = [] if self.recipients else None
        self._flushed = False
        self.failed_recipients: List[str] = []

    @property
    def enabled(self) -> bool:
        return self._buffer is not None

    @property
    def flushed(self) -> bool:
        return self._flushed

    def record(self, line: str) -> None:
        """Append one formatted log line to the transcript."""
        if self._flushed:
            raise RuntimeError("Notification already sent for this deployment")
        if self._buffer is not None:
            self._buffer.append(line)

    def compose(self, subject: str) -> NotificationMessage:
        """Build the summary message from the buffered transcript."""
        return NotificationMessage(
            subject=subject,
            body="".join(self._buffer or []),
            recipients=self.recipients,
        )

    def flush(self, subject: str) -> Optional[NotificationMessage]:
        """
        Send the transcript to every recipient.

        Each recipient is tried independently; a failed delivery is logged and
        does not stop the rest. Can only be called once.

        Returns:
            The message that was sent, or None when there are no recipients
        """
        if self._flushed:
            raise RuntimeError("Notification already sent for this deployment")
        self._flushed = True

        if self._buffer is None:
            return None

        message = self.compose(subject)
        self._buffer = None

        transport = self.transport or SmtpMailTransport()
        for recipient in message.recipients:
            try:
                transport.send(recipient, message.subject, message.body)
            except Exception as e:
                self.failed_recipients.append(recipient)
                logger.warning("Could not send deployment notification to %s: %s", recipient, e)

        return message
