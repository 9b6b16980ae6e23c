"""Authentication service for session management."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.user import User
from club_api.models.session import Session
from club_api.utils.security import (
    hash_password,
    verify_password,
    password_needs_rehash,
    generate_session_token,
)
from club_api.api.utils.validation import normalize_email
from club_api.utils.dates import as_utc


logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling authentication and session management."""

    def __init__(self, session: AsyncSession, session_expiry_hours: int = 24):
        """
        Initialize auth service.

        Args:
            session: Database session
            session_expiry_hours: Hours until session expires (default 24)
        """
        self.session = session
        self.session_expiry_hours = session_expiry_hours

    async def authenticate_user(
        self,
        email: str,
        password: str
    ) -> Optional[User]:
        """
        Authenticate a member by email and password.

        Participants created by event registration have no password and
        cannot sign in until they claim their account.

        Returns:
            User object if authentication successful, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.email_normalized == normalize_email(email))
        )
        user = result.scalar_one_or_none()

        if not user:
            return None

        if not user.is_active:
            return None

        if not user.password_hash:
            return None

        if not verify_password(password, user.password_hash):
            return None

        if password_needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            await self.session.commit()
            logger.info("Upgraded password hash for user %d", user.id)

        return user

    async def create_session(
        self,
        user_id: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Tuple[str, datetime]:
        """
        Create a new session for a user.

        Returns:
            Tuple of (session_token, expires_at)
        """
        session_token = generate_session_token()
        expires_at = datetime.now(timezone.utc) + timedelta(hours=self.session_expiry_hours)

        session = Session(
            session_token=session_token,
            user_id=user_id,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            is_active=True
        )

        self.session.add(session)
        await self.session.commit()

        return session_token, expires_at

    async def get_session(self, session_token: str) -> Optional[Session]:
        """Get a session record by token."""
        result = await self.session.execute(
            select(Session).where(Session.session_token == session_token)
        )
        return result.scalar_one_or_none()

    async def validate_session(
        self,
        session_token: str
    ) -> Optional[User]:
        """
        Validate a session token and return the associated user.

        Returns:
            User object if session is valid, None otherwise
        """
        result = await self.session.execute(
            select(Session).where(
                Session.session_token == session_token,
                Session.is_active == True
            )
        )
        session = result.scalar_one_or_none()

        if not session:
            return None

        if as_utc(session.expires_at) < datetime.now(timezone.utc):
            session.is_active = False
            await self.session.commit()
            return None

        result = await self.session.execute(
            select(User).where(User.id == session.user_id)
        )
        user = result.scalar_one_or_none()

        if not user or not user.is_active:
            return None

        return user

    async def invalidate_session(
        self,
        session_token: str
    ) -> bool:
        """
        Invalidate a session (logout).

        Returns:
            True if session was invalidated, False if not found
        """
        session = await self.get_session(session_token)

        if not session:
            return False

        session.is_active = False
        await self.session.commit()

        return True

    async def invalidate_all_user_sessions(
        self,
        user_id: int,
        keep_token: Optional[str] = None
    ) -> int:
        """
        Invalidate all sessions for a user.

        Args:
            user_id: Owner of the sessions
            keep_token: Session to leave signed in, usually the caller's own

        Returns:
            Number of sessions invalidated
        """
        query = select(Session).where(
            Session.user_id == user_id,
            Session.is_active == True
        )
        if keep_token:
            query = query.where(Session.session_token != keep_token)

        result = await self.session.execute(query)
        sessions = result.scalars().all()

        for session in sessions:
            session.is_active = False

        await self.session.commit()

        return len(sessions)

    async def cleanup_expired_sessions(self) -> int:
        """
        Remove expired and inactive sessions from the database.

        Returns:
            Number of sessions removed
        """
        result = await self.session.execute(
            delete(Session).where(
                (Session.expires_at < datetime.now(timezone.utc)) |
                (Session.is_active == False)
            ).execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount or 0
