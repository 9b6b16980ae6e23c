"""
Unit tests for NotificationService.

SendGrid is mocked; nothing is sent.
"""

from datetime import datetime, timezone

import pytest

from club_api.config import Settings
from club_api.services.notification_service import NotificationService, format_event_date


def make_settings(**overrides) -> Settings:
    fields = {
        "SENDGRID_API_KEY": "SG.test-key",
        "SENDGRID_FROM_EMAIL": "club@test.com",
        "SENDGRID_FROM_NAME": "Science Club",
        "SENDGRID_SANDBOX_MODE": True,
        "CONTACT_NOTIFY_EMAIL": "inbox@test.com",
    }
    fields.update(overrides)
    return Settings(**fields)


@pytest.fixture
def sendgrid_client(mocker):
    """Mocked SendGrid client accepting every message."""
    client = mocker.MagicMock()
    client.send.return_value = mocker.MagicMock(status_code=202)
    mocker.patch(
        "club_api.services.notification_service.SendGridAPIClient",
        return_value=client
    )
    return client


@pytest.mark.unit
class TestNotificationService:
    """Test best-effort email delivery."""

    def test_disabled_without_api_key(self, sendgrid_client):
        """Test emails are skipped when SendGrid is not configured."""
        service = NotificationService(make_settings(SENDGRID_API_KEY=""))

        assert service.enabled is False
        assert service.send_email("a@test.com", "A", "Hi", "<p>Hi</p>", "Hi") is False
        sendgrid_client.send.assert_not_called()

    def test_registration_confirmation_sent(self, sendgrid_client):
        """Test the confirmation goes to the participant."""
        service = NotificationService(make_settings())

        sent = service.send_registration_confirmation(
            email="ada@test.com",
            name="Ada Lovelace",
            event_title="Intro to Lab Safety",
            event_date=datetime(2026, 3, 14, tzinfo=timezone.utc),
            event_location="Room B2040",
        )

        assert sent is True
        sendgrid_client.send.assert_called_once()
        message = sendgrid_client.send.call_args[0][0].get()
        assert message["subject"] == "You're registered: Intro to Lab Safety"
        assert message["personalizations"][0]["to"][0]["email"] == "ada@test.com"
        assert message["mail_settings"]["sandbox_mode"]["enable"] is True

    def test_send_failure_returns_false(self, sendgrid_client):
        """Test a SendGrid error is logged and swallowed."""
        sendgrid_client.send.side_effect = Exception("HTTP Error 401: Unauthorized")
        service = NotificationService(make_settings())

        assert service.send_email("a@test.com", "A", "Hi", "<p>Hi</p>", "Hi") is False

    def test_contact_notification_goes_to_inbox(self, sendgrid_client):
        """Test contact messages are forwarded to the club inbox."""
        service = NotificationService(make_settings())

        assert service.send_contact_notification(
            "Visitor", "visitor@test.com", "Summer workshops", "<b>Hello</b>"
        ) is True
        message = sendgrid_client.send.call_args[0][0].get()
        assert message["personalizations"][0]["to"][0]["email"] == "inbox@test.com"

    def test_contact_notification_without_inbox(self, sendgrid_client):
        """Test contact forwarding is skipped when no inbox is configured."""
        service = NotificationService(make_settings(CONTACT_NOTIFY_EMAIL=""))

        assert service.send_contact_notification("V", "v@test.com", "Subject", "Body") is False
        sendgrid_client.send.assert_not_called()

    def test_format_event_date(self):
        """Test date formatting for emails."""
        assert format_event_date(datetime(2026, 3, 14)) == "Mar 14, 2026"
        assert format_event_date(None) == "TBA"
