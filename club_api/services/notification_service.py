"""Best-effort email notifications via SendGrid.

Notifications are dispatched after the response is sent (FastAPI background
tasks). A failed notification is logged and never surfaces to the caller or
undoes the operation that triggered it.
"""
import html
import logging
from datetime import datetime
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content, MailSettings, SandBoxMode

from club_api.config import Settings, get_settings


logger = logging.getLogger(__name__)


def format_event_date(value: Optional[datetime]) -> str:
    """Human readable event date, e.g. "Mar 14, 2026"."""
    if value is None:
        return "TBA"
    return value.strftime("%b %d, %Y")


class NotificationService:
    """Sends transactional emails when SendGrid is configured."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.client = (
            SendGridAPIClient(self.settings.SENDGRID_API_KEY)
            if self.settings.SENDGRID_API_KEY else None
        )
        self.from_email = Email(self.settings.SENDGRID_FROM_EMAIL, self.settings.SENDGRID_FROM_NAME)

    @property
    def enabled(self) -> bool:
        return self.client is not None and bool(self.settings.SENDGRID_FROM_EMAIL)

    def send_email(
        self,
        to_email: str,
        to_name: str,
        subject: str,
        html_body: str,
        text_body: str
    ) -> bool:
        """
        Send a single email.

        Returns:
            True if SendGrid accepted the message, False if skipped or failed
        """
        if not self.enabled:
            logger.info("Email to %s skipped (SendGrid not configured): %s", to_email, subject)
            return False

        message = Mail(
            from_email=self.from_email,
            to_emails=To(to_email, to_name),
            subject=subject,
            html_content=Content("text/html", html_body),
            plain_text_content=Content("text/plain", text_body)
        )

        # Emails are validated but not delivered in sandbox mode
        if self.settings.SENDGRID_SANDBOX_MODE:
            message.mail_settings = MailSettings()
            message.mail_settings.sandbox_mode = SandBoxMode(enable=True)

        try:
            response = self.client.send(message)
        except Exception as e:
            logger.error("Failed to send email to %s (%s): %s", to_email, subject, e, exc_info=True)
            return False

        logger.info(
            "Email sent: status_code=%s, to=%s, subject='%s', sandbox=%s",
            response.status_code, to_email, subject, self.settings.SENDGRID_SANDBOX_MODE
        )
        return True

    def send_registration_confirmation(
        self,
        email: str,
        name: str,
        event_title: str,
        event_date: Optional[datetime],
        event_location: str
    ) -> bool:
        """Confirm an event registration to the participant."""
        date_text = format_event_date(event_date)
        subject = f"You're registered: {event_title}"
        text_body = (
            f"Hi {name},\n\n"
            f"You are registered for {event_title} on {date_text} at {event_location}.\n\n"
            f"See you there!\n{self.settings.SENDGRID_FROM_NAME}"
        )
        html_body = (
            f"<p>Hi {html.escape(name)},</p>"
            f"<p>You are registered for <strong>{html.escape(event_title)}</strong> "
            f"on {date_text} at {html.escape(event_location)}.</p>"
            f"<p>See you there!<br>{html.escape(self.settings.SENDGRID_FROM_NAME)}</p>"
        )
        return self.send_email(email, name, subject, html_body, text_body)

    def send_contact_notification(
        self,
        name: str,
        email: str,
        subject: str,
        message: str
    ) -> bool:
        """Forward a contact form submission to the club inbox."""
        recipient = self.settings.CONTACT_NOTIFY_EMAIL
        if not recipient:
            logger.info("Contact notification skipped (CONTACT_NOTIFY_EMAIL not set)")
            return False

        text_body = f"From: {name} <{email}>\nSubject: {subject}\n\n{message}"
        html_body = (
            f"<p><strong>From:</strong> {html.escape(name)} &lt;{html.escape(email)}&gt;</p>"
            f"<p><strong>Subject:</strong> {html.escape(subject)}</p>"
            f"<p>{html.escape(message)}</p>"
        )
        return self.send_email(
            recipient,
            self.settings.SENDGRID_FROM_NAME,
            f"New contact form message: {subject}",
            html_body,
            text_body
        )


def get_notification_service() -> NotificationService:
    """Dependency returning a notification service for the current settings."""
    return NotificationService(get_settings())
