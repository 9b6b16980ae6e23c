"""FastAPI dependencies for authentication and authorization."""
from typing import Optional
from fastapi import Cookie, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.api.exceptions import APIError, forbidden
from club_api.config import Settings, get_settings
from club_api.database import get_db
from club_api.models.user import User
from club_api.services.auth_service import AuthService
from club_api.services.exceptions import AuthorizationError


__all__ = [
    "get_db",
    "get_auth_service",
    "get_session_token",
    "get_current_user",
    "get_current_active_user",
    "get_current_admin_user",
]


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    """
    Dependency to get auth service.

    Args:
        db: Database session
        settings: Application settings

    Returns:
        AuthService instance
    """
    return AuthService(
        session=db,
        session_expiry_hours=settings.SESSION_EXPIRY_HOURS
    )


async def get_session_token(
    session_token: Optional[str] = Cookie(None, alias="session_token")
) -> Optional[str]:
    """Extract session token from cookie."""
    return session_token


async def get_current_user(
    session_token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get the current authenticated user.

    Raises:
        APIError: 401 if not authenticated or the session is invalid
    """
    if not session_token:
        raise APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Not authenticated",
            code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Cookie"},
        )

    user = await auth_service.validate_session(session_token)

    if not user:
        raise APIError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid or expired session",
            code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Cookie"},
        )

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get the current active user.

    Raises:
        APIError: 403 if the account is deactivated
    """
    if not current_user.is_active:
        raise forbidden("Inactive user")
    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Get the current admin user.

    Admins manage events and their registrations, members, the blog,
    the team roster and the contact inbox.

    Raises:
        AuthorizationError: 403 if the user is not an admin
    """
    if not current_user.is_admin:
        raise AuthorizationError()
    return current_user

