"""Standard HTTP exceptions for common cases."""
from typing import Optional
from fastapi import HTTPException, status


class APIError(HTTPException):
    """HTTPException that also carries a stable error code."""

    def __init__(self, status_code: int, detail: str, code: str, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code


def not_found(resource: str = "Resource", resource_id: Optional[int] = None) -> HTTPException:
    """
    Return 404 Not Found exception.

    Args:
        resource: Name of the resource that wasn't found
        resource_id: Optional ID of the resource

    Returns:
        HTTPException with 404 status code

    Examples:
        raise not_found("Team member", 12)  # "Team member with ID 12 not found"
        raise not_found("Blog post")        # "Blog post not found"
    """
    detail = f"{resource} not found"
    if resource_id:
        detail = f"{resource} with ID {resource_id} not found"
    return APIError(status.HTTP_404_NOT_FOUND, detail, code="NOT_FOUND")


def forbidden(message: str = "Not authorized to perform this action") -> HTTPException:
    """
    Return 403 Forbidden exception.

    Examples:
        raise forbidden()
        raise forbidden("Admin access required")
    """
    return APIError(status.HTTP_403_FORBIDDEN, message, code="FORBIDDEN")


def bad_request(message: str, code: str = "BAD_REQUEST") -> HTTPException:
    """
    Return 400 Bad Request exception.

    Examples:
        raise bad_request("User already exists with this email or student ID")
    """
    return APIError(status.HTTP_400_BAD_REQUEST, message, code=code)


def unauthorized(message: str = "Invalid credentials") -> HTTPException:
    """
    Return 401 Unauthorized exception.

    Examples:
        raise unauthorized()
        raise unauthorized("Invalid access code")
    """
    return APIError(status.HTTP_401_UNAUTHORIZED, message, code="UNAUTHORIZED")


def rate_limited(message: str = "Too many requests. Please try again later.") -> HTTPException:
    """Return 429 Too Many Requests exception."""
    return APIError(status.HTTP_429_TOO_MANY_REQUESTS, message, code="RATE_LIMITED")
