"""
Integration tests for event registration endpoints.

Tests /api/events/{id}/register and the admin registration endpoints,
including the error codes returned when a registration is refused.
"""

import pytest
from httpx import AsyncClient

from club_api.models.event import Event


def form(n: int) -> dict:
    return {
        "name": f"Student Number{n}",
        "email": f"student{n}@test.com",
        "externalId": f"70000000{n}",
        "program": "Physics",
        "year": 1,
    }


@pytest.mark.integration
@pytest.mark.asyncio
class TestRegisterEndpoint:
    """Test public event registration."""

    async def test_register_success(self, client: AsyncClient, open_event: Event, registration_form: dict):
        """Test a registration returns the registration and participant."""
        response = await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Successfully registered for event"
        registration = data["registration"]
        assert registration["event_id"] == open_event.id
        assert registration["participant"]["email"] == "ada@test.com"
        assert registration["participant"]["first_name"] == "Ada"
        assert registration["participant"]["last_name"] == "Lovelace"
        assert registration["participant"]["external_id"] == "123456789"

        response = await client.get(f"/api/events/{open_event.id}")
        assert response.json()["current_capacity"] == 1
        assert response.json()["spots_remaining"] == 2

    async def test_register_accepts_snake_case_external_id(self, client: AsyncClient, open_event: Event):
        """Test the student number may be sent as external_id."""
        body = form(1)
        body["external_id"] = body.pop("externalId")

        response = await client.post(f"/api/events/{open_event.id}/register", json=body)

        assert response.status_code == 201
        assert response.json()["registration"]["participant"]["external_id"] == "700000001"

    async def test_register_unknown_event(self, client: AsyncClient, registration_form: dict):
        """Test registering for a missing event."""
        response = await client.post("/api/events/99999/register", json=registration_form)

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "EVENT_NOT_FOUND"
        assert data["retriable"] is False

    async def test_register_twice(self, client: AsyncClient, open_event: Event, registration_form: dict):
        """Test the same participant cannot register twice."""
        await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        response = await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        assert response.status_code == 400
        assert response.json()["code"] == "ALREADY_REGISTERED"

    async def test_register_full_event(self, client: AsyncClient, open_event: Event):
        """Test a full event refuses further registrations."""
        # The refused request rolls back the shared session and expires fixtures
        event_id = open_event.id
        for n in range(1, 4):
            response = await client.post(f"/api/events/{event_id}/register", json=form(n))
            assert response.status_code == 201

        response = await client.post(f"/api/events/{event_id}/register", json=form(4))

        assert response.status_code == 400
        assert response.json()["code"] == "CAPACITY_EXCEEDED"

        response = await client.get(f"/api/events/{event_id}")
        assert response.json()["is_full"] is True
        assert response.json()["current_capacity"] == 3

    async def test_register_unbounded_event(self, client: AsyncClient, unbounded_event: Event):
        """Test an event without a ceiling never fills."""
        for n in range(1, 6):
            response = await client.post(f"/api/events/{unbounded_event.id}/register", json=form(n))
            assert response.status_code == 201

        response = await client.get(f"/api/events/{unbounded_event.id}")
        assert response.json()["spots_remaining"] is None
        assert response.json()["current_capacity"] == 5

    async def test_register_validation_error(self, client: AsyncClient, open_event: Event):
        """Test malformed registration data is rejected with field errors."""
        response = await client.post(
            f"/api/events/{open_event.id}/register",
            json={"name": "", "email": "not-an-email", "externalId": "1", "program": "Physics", "year": 9}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        fields = {error["field"] for error in data["errors"]}
        assert {"name", "email", "year"} <= fields

    async def test_register_name_too_long_for_columns(self, client: AsyncClient, open_event: Event):
        """Test a name with a word longer than the stored name columns is a 400."""
        event_id = open_event.id
        body = form(1)
        body["name"] = "A" * 51 + " Lovelace"

        response = await client.post(f"/api/events/{event_id}/register", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["retriable"] is False
        assert [error["field"] for error in data["errors"]] == ["name"]

        response = await client.get(f"/api/events/{event_id}")
        assert response.json()["current_capacity"] == 0

    async def test_register_sends_confirmation(
        self, client: AsyncClient, open_event: Event, registration_form: dict, mocker
    ):
        """Test a confirmation email is dispatched after registering."""
        send = mocker.patch(
            "club_api.services.notification_service.NotificationService.send_registration_confirmation",
            return_value=True
        )

        response = await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        assert response.status_code == 201
        send.assert_called_once()
        assert send.call_args[0][0] == "ada@test.com"
        assert send.call_args[0][2] == "Intro to Lab Safety"

    async def test_register_does_not_reload_event(
        self, client: AsyncClient, open_event: Event, registration_form: dict, mocker
    ):
        """Test the confirmation uses the event from the registration, even if it is gone afterwards."""
        mocker.patch(
            "club_api.services.event_service.EventService.get_event",
            return_value=None
        )
        send = mocker.patch(
            "club_api.services.notification_service.NotificationService.send_registration_confirmation",
            return_value=True
        )

        response = await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        assert response.status_code == 201
        send.assert_called_once()
        assert send.call_args[0][2] == "Intro to Lab Safety"

    async def test_failed_email_keeps_registration(
        self, client: AsyncClient, open_event: Event, registration_form: dict, mocker
    ):
        """Test a SendGrid failure does not undo the registration."""
        mocker.patch(
            "club_api.services.notification_service.NotificationService.send_email",
            return_value=False
        )

        response = await client.post(f"/api/events/{open_event.id}/register", json=registration_form)

        assert response.status_code == 201
        response = await client.get(f"/api/events/{open_event.id}")
        assert response.json()["current_capacity"] == 1


@pytest.mark.integration
@pytest.mark.asyncio
class TestRegistrationAdminEndpoints:
    """Test listing and cancelling registrations."""

    async def test_list_requires_authentication(self, client: AsyncClient, open_event: Event):
        """Test the registration list needs a session."""
        response = await client.get(f"/api/events/{open_event.id}/registrations")
        assert response.status_code == 401

    async def test_list_requires_admin(
        self, client: AsyncClient, open_event: Event, member_session_token: str
    ):
        """Test members cannot see registrations."""
        client.cookies.set("session_token", member_session_token)
        response = await client.get(f"/api/events/{open_event.id}/registrations")

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"
        assert response.json()["retriable"] is False
        assert response.json()["detail"] == "Admin access required"

    async def test_list_in_registration_order(
        self, client: AsyncClient, open_event: Event, admin_session_token: str
    ):
        """Test registrations are listed in the order they were made."""
        for n in (3, 1, 2):
            await client.post(f"/api/events/{open_event.id}/register", json=form(n))

        client.cookies.set("session_token", admin_session_token)
        response = await client.get(f"/api/events/{open_event.id}/registrations")

        assert response.status_code == 200
        emails = [r["participant"]["email"] for r in response.json()]
        assert emails == ["student3@test.com", "student1@test.com", "student2@test.com"]

    async def test_list_unknown_event(self, client: AsyncClient, admin_session_token: str):
        """Test listing registrations of a missing event."""
        client.cookies.set("session_token", admin_session_token)
        response = await client.get("/api/events/99999/registrations")

        assert response.status_code == 404
        assert response.json()["code"] == "EVENT_NOT_FOUND"

    async def test_cancel_frees_seat(
        self, client: AsyncClient, open_event: Event, admin_session_token: str
    ):
        """Test cancelling a registration frees its seat."""
        response = await client.post(f"/api/events/{open_event.id}/register", json=form(1))
        registration_id = response.json()["registration"]["id"]

        client.cookies.set("session_token", admin_session_token)
        response = await client.delete(f"/api/events/{open_event.id}/registrations/{registration_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["current_capacity"] == 0
        assert data["spots_remaining"] == 3

        response = await client.get(f"/api/events/{open_event.id}/registrations")
        assert response.json() == []

    async def test_cancel_unknown_registration(
        self, client: AsyncClient, open_event: Event, admin_session_token: str
    ):
        """Test cancelling a registration that does not exist."""
        client.cookies.set("session_token", admin_session_token)
        response = await client.delete(f"/api/events/{open_event.id}/registrations/99999")

        assert response.status_code == 404
        assert response.json()["code"] == "REGISTRATION_NOT_FOUND"
