"""
Outgoing account emails.

Sending is best effort: every attempt ends in a NotificationResult, failures
are logged and never reach the request that triggered them.
"""

import logging
import smtplib
from dataclasses import dataclass
from html import escape
from email.message import EmailMessage
from typing import Optional, Protocol

from fastapi import BackgroundTasks

from config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    recipient: str
    subject: str
    text: str
    html: str


@dataclass(frozen=True)
class NotificationResult:
    delivered: bool
    error: Optional[str] = None


class Notifier(Protocol):
    def send(self, notification: Notification) -> NotificationResult: ...


class SMTPNotifier:
    """Deliver notifications through an SMTP server over SSL."""

    def __init__(self, host: str, port: int, username: str, password: str, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.timeout = timeout

    def _build_message(self, notification: Notification) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = notification.subject
        message["From"] = self.username
        message["To"] = notification.recipient
        message.set_content(notification.text)
        message.add_alternative(notification.html, subtype="html")
        return message

    def send(self, notification: Notification) -> NotificationResult:
        message = self._build_message(notification)
        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                server.login(self.username, self._password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return NotificationResult(delivered=False, error=str(exc))
        return NotificationResult(delivered=True)


class LogNotifier:
    """Stand-in used when no SMTP credentials are configured."""

    def send(self, notification: Notification) -> NotificationResult:
        logger.warning(
            "SMTP credentials not configured, email not sent",
            extra={"recipient": notification.recipient, "subject": notification.subject},
        )
        return NotificationResult(delivered=False, error="SMTP credentials not configured")


def build_notifier(settings: Settings) -> Notifier:
    if settings.mail_configured:
        return SMTPNotifier(
            settings.smtp_host,
            settings.smtp_port,
            settings.email_user,  # type: ignore[arg-type]
            settings.email_password,  # type: ignore[arg-type]
        )
    return LogNotifier()


def deliver(notifier: Notifier, notification: Notification) -> NotificationResult:
    """
    Send one notification and log the outcome.

    Args:
        notifier: Transport used for delivery.
        notification: Message to send.

    Returns:
        NotificationResult: Never raises, errors are folded into the result.
    """
    try:
        result = notifier.send(notification)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Notifier raised while sending email", extra={"recipient": notification.recipient})
        result = NotificationResult(delivered=False, error=str(exc))

    if result.delivered:
        logger.info("Email sent", extra={"recipient": notification.recipient, "subject": notification.subject})
    else:
        logger.error(
            "Email sending failed",
            extra={"recipient": notification.recipient, "error": result.error},
        )
    return result


class NotificationDispatcher:
    """
    Hand notifications to a notifier without holding up the request.

    With background tasks the send runs after the response is written,
    otherwise it runs inline.
    """

    def __init__(self, notifier: Notifier, background_tasks: Optional[BackgroundTasks] = None):
        self.notifier = notifier
        self.background_tasks = background_tasks

    def dispatch(self, notification: Notification) -> None:
        if self.background_tasks is not None:
            self.background_tasks.add_task(deliver, self.notifier, notification)
        else:
            deliver(self.notifier, notification)


def verification_email(recipient: str, name: str, code: str) -> Notification:
    return Notification(
        recipient=recipient,
        subject="Verify your account",
        text=f"Hi {name}, your code is: {code}",
        html=f"<div><h2>Hello {escape(name)},</h2><p>Your code is: <strong>{code}</strong></p></div>",
    )


def verified_email(recipient: str, name: str) -> Notification:
    return Notification(
        recipient=recipient,
        subject="Account Verified",
        text=f"Hi {name}, your account is now verified.",
        html="<p>You're now verified. You may log in.</p>",
    )
