"""Authentication API routes."""
import logging
from datetime import datetime, timezone, timedelta
from fastapi import APIRouter, Depends, Response, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.dependencies import (
    get_db,
    get_auth_service,
    get_current_active_user,
    get_session_token
)
from club_api.services.auth_service import AuthService
from club_api.services.participant_service import ParticipantService
from club_api.models.user import User
from club_api.models.session import Session
from club_api.schemas.auth import (
    SignupRequest,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserResponse,
    PasswordChangeRequest,
    PasswordChangeResponse
)
from club_api.config import get_settings
from club_api.api.utils.request import extract_client_metadata
from club_api.api.exceptions import bad_request, unauthorized, rate_limited
from club_api.utils.security import hash_password


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Authentication"])
settings = get_settings()

# Rate limiting storage (per process)
# Key: IP address, Value: list of login attempt timestamps
_login_rate_limit_cache: dict = {}


def check_login_rate_limit(
    ip_address: str,
    window_minutes: int = 15,
    max_attempts: int = 5
) -> bool:
    """
    Check if IP address has exceeded login rate limit.

    Args:
        ip_address: Client IP address
        window_minutes: Time window in minutes (default 15)
        max_attempts: Maximum login attempts allowed (default 5)

    Returns:
        True if rate limit exceeded, False if OK to proceed
    """
    now = datetime.now(timezone.utc)
    cache_key = f"login_{ip_address}"

    if cache_key not in _login_rate_limit_cache:
        _login_rate_limit_cache[cache_key] = []

    # Clean old entries outside the time window
    window_start = now - timedelta(minutes=window_minutes)
    _login_rate_limit_cache[cache_key] = [
        ts for ts in _login_rate_limit_cache[cache_key] if ts > window_start
    ]

    if len(_login_rate_limit_cache[cache_key]) >= max_attempts:
        return True

    _login_rate_limit_cache[cache_key].append(now)
    return False


def clear_login_rate_limit(ip_address: str) -> None:
    """Clear login rate limit for an IP address after successful login."""
    cache_key = f"login_{ip_address}"
    if cache_key in _login_rate_limit_cache:
        del _login_rate_limit_cache[cache_key]


def _set_session_cookie(response: Response, session_token: str) -> None:
    response.set_cookie(
        key="session_token",
        value=session_token,
        httponly=True,
        secure=not settings.DEBUG,  # HTTPS only in production
        samesite="lax",
        max_age=settings.SESSION_EXPIRY_HOURS * 3600,
        path="/"
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: SignupRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Sign up as a club member and start a session.

    Someone who already registered for an event with this email claims that
    participant record instead of getting a duplicate account.

    Raises:
        HTTPException: If the email or student number already has an account
    """
    user = await ParticipantService(db).sign_up(
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        external_id=data.external_id,
        program=data.program,
        year=data.year,
        password_hash=hash_password(data.password),
    )
    if not user:
        raise bad_request("User already exists with this email or student ID")

    ip_address, user_agent = extract_client_metadata(request)
    session_token, expires_at = await auth_service.create_session(
        user_id=user.id,
        ip_address=ip_address,
        user_agent=user_agent
    )
    _set_session_cookie(response, session_token)

    logger.info("New member signed up: %s (id=%d)", user.email, user.id)
    return LoginResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        expires_at=expires_at
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate user and create session.

    Rate limited per client IP address to prevent brute force attacks.

    Raises:
        HTTPException: If authentication fails or rate limit exceeded
    """
    ip_address, user_agent = extract_client_metadata(request)

    if check_login_rate_limit(
        ip_address,
        window_minutes=settings.LOGIN_RATE_LIMIT_WINDOW_MINUTES,
        max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS
    ):
        logger.warning("Login rate limit exceeded for %s", ip_address)
        raise rate_limited(
            f"Too many login attempts. Please wait "
            f"{settings.LOGIN_RATE_LIMIT_WINDOW_MINUTES} minutes before trying again."
        )

    user = await auth_service.authenticate_user(
        email=login_data.email,
        password=login_data.password
    )

    if not user:
        logger.info("Failed login for %s from %s", login_data.email, ip_address)
        raise unauthorized("Invalid credentials")

    clear_login_rate_limit(ip_address)

    session_token, expires_at = await auth_service.create_session(
        user_id=user.id,
        ip_address=ip_address,
        user_agent=user_agent
    )
    _set_session_cookie(response, session_token)

    return LoginResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        expires_at=expires_at
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    session_token: str = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service),
    current_user: User = Depends(get_current_active_user)
):
    """Logout user by invalidating session."""
    if session_token:
        await auth_service.invalidate_session(session_token)

    response.delete_cookie(
        key="session_token",
        path="/"
    )

    return LogoutResponse(message="Logout successful")


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user),
    session_token: str = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Get current authenticated user information with session expiry."""
    session: Session = await auth_service.get_session(session_token)

    return {
        "user": UserResponse.model_validate(current_user),
        "expires_at": session.expires_at if session else None,
        "is_admin": current_user.is_admin
    }


@router.post("/password/change", response_model=PasswordChangeResponse)
async def change_password(
    data: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    session_token: str = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Change user's password (requires current password).

    Every other session of the user is signed out; the session making the
    change stays valid.

    Raises:
        HTTPException: If current password is incorrect
    """
    user = await auth_service.authenticate_user(
        email=current_user.email,
        password=data.current_password
    )

    if not user:
        raise unauthorized("Current password is incorrect")

    user.password_hash = hash_password(data.new_password)
    await db.commit()

    dropped = await auth_service.invalidate_all_user_sessions(user.id, keep_token=session_token)

    logger.info("Password changed for user %d, %d other sessions closed", user.id, dropped)
    return PasswordChangeResponse(message="Password changed successfully")
