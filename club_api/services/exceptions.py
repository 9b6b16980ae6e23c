"""Domain errors raised by services.

Each error carries a stable ``code``, the HTTP status it maps to, and whether
a client may retry the same request. The application renders them with
``domain_error_handler`` in ``club_api.main``.
"""
from typing import Optional


class ClubError(Exception):
    """Base class for domain errors."""

    code = "INTERNAL_ERROR"
    status_code = 500
    retriable = False
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "retriable": self.retriable}


class ValidationError(ClubError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid input"


class NotFoundError(ClubError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class EventNotFoundError(NotFoundError):
    code = "EVENT_NOT_FOUND"
    default_message = "Event not found"


class RegistrationNotFoundError(NotFoundError):
    code = "REGISTRATION_NOT_FOUND"
    default_message = "Registration not found"


class CapacityExceededError(ClubError):
    code = "CAPACITY_EXCEEDED"
    status_code = 400
    default_message = "Event is at full capacity"


class AlreadyRegisteredError(ClubError):
    code = "ALREADY_REGISTERED"
    status_code = 400
    default_message = "Already registered for this event"


class AuthorizationError(ClubError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Admin access required"


class StoreUnavailableError(ClubError):
    code = "STORE_UNAVAILABLE"
    status_code = 500
    retriable = True
    default_message = "Storage is temporarily unavailable, please try again"
