"""
Pytest configuration and fixtures for the club API tests.

This module provides shared fixtures for database, authentication, test client,
and common test data.
"""

import os
from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

# Settings are read at import time by several modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("SENDGRID_API_KEY", "")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from club_api.main import app
from club_api.database import Base, get_db
from club_api.models.user import User, UserRole
from club_api.models.event import Event
from club_api.config import Settings, get_settings
from club_api.api.utils.dependencies import get_blog_store
from club_api.api.utils.validation import normalize_email
from club_api.services.blog_store import BlogFileStore
from club_api.utils.security import hash_password


# ============================================================================
# Test Configuration
# ============================================================================

@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Provide test-specific settings.

    Uses in-memory SQLite database for tests.
    """
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY="test-secret-key-for-testing-only",
        DEBUG=True,
        SENDGRID_API_KEY="",
        SENDGRID_FROM_EMAIL="test@example.com",
        SENDGRID_FROM_NAME="Test Club",
        SENDGRID_SANDBOX_MODE=True,
        MENTOR_ACCESS_CODE="TESTMENTOR",
        SCHEDULER_ENABLED=False,
        FRONTEND_URL="http://localhost:8000",
    )


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_engine(test_settings: Settings):
    """
    Create async database engine for tests.

    Uses in-memory SQLite with StaticPool to ensure all connections
    share the same in-memory database.
    """
    engine = create_async_engine(
        test_settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for tests.

    Creates a new session for each test and rolls back after the test.
    """
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def file_engine(tmp_path):
    """
    File-backed SQLite engine for tests that run sessions concurrently.

    Each session gets its own connection, like a real connection pool.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def file_session_factory(file_engine):
    """Session factory bound to the file-backed engine."""
    return async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def blog_store(tmp_path) -> BlogFileStore:
    """Blog file store in a temporary directory."""
    return BlogFileStore(str(tmp_path / "blog-data"))


@pytest_asyncio.fixture(scope="function")
async def client(
    async_engine,
    db_session: AsyncSession,
    test_settings: Settings,
    blog_store: BlogFileStore
) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide HTTP test client.

    Overrides the database session dependency to use the test database.
    The same db_session instance is reused across all dependency injections
    so data created by fixtures is visible to requests.
    """
    from club_api.api.routes import auth
    auth._login_rate_limit_cache.clear()

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    def override_get_settings():
        return test_settings

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings
    app.dependency_overrides[get_blog_store] = lambda: blog_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    auth._login_rate_limit_cache.clear()


# ============================================================================
# User Fixtures
# ============================================================================

def _make_user(email: str, password: str, role: str, external_id: str, first_name: str) -> User:
    return User(
        email=email,
        email_normalized=normalize_email(email),
        external_id=external_id,
        first_name=first_name,
        last_name="User",
        program="Computer Science",
        year=2,
        role=role,
        is_active=True,
        password_hash=hash_password(password),
    )


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create and return an admin user for testing."""
    user = _make_user("admin@test.com", "admin123", UserRole.ADMIN.value, "ADM00001", "Admin")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def moderator_user(db_session: AsyncSession) -> User:
    """Create and return a moderator user for testing."""
    user = _make_user("moderator@test.com", "moderator123", UserRole.MODERATOR.value, "MOD00001", "Moderator")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def member_user(db_session: AsyncSession) -> User:
    """Create and return a regular member for testing."""
    user = _make_user("member@test.com", "member123", UserRole.MEMBER.value, "MEM00001", "Member")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# ============================================================================
# Authentication Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def admin_session_token(client: AsyncClient, admin_user: User) -> str:
    """Authenticate as admin and return session token."""
    response = await client.post(
        "/api/auth/login",
        json={"email": admin_user.email, "password": "admin123"}
    )
    assert response.status_code == 200
    client.cookies.clear()
    return response.cookies.get("session_token")


@pytest_asyncio.fixture
async def member_session_token(client: AsyncClient, member_user: User) -> str:
    """Authenticate as a regular member and return session token."""
    response = await client.post(
        "/api/auth/login",
        json={"email": member_user.email, "password": "member123"}
    )
    assert response.status_code == 200
    client.cookies.clear()
    return response.cookies.get("session_token")


@pytest_asyncio.fixture
async def moderator_session_token(client: AsyncClient, moderator_user: User) -> str:
    """Authenticate as a moderator and return session token."""
    response = await client.post(
        "/api/auth/login",
        json={"email": moderator_user.email, "password": "moderator123"}
    )
    assert response.status_code == 200
    client.cookies.clear()
    return response.cookies.get("session_token")


# ============================================================================
# Event Fixtures
# ============================================================================

def make_event(max_capacity=None, title="Intro to Lab Safety", days_ahead=14) -> Event:
    """Build an open event (not yet added to a session)."""
    return Event(
        title=title,
        description="Hands-on session covering the basics of working safely in a lab.",
        category="WORKSHOP",
        status="open",
        date=datetime.now(timezone.utc) + timedelta(days=days_ahead),
        start_time="18:00",
        end_time="20:00",
        location="Room B2040",
        max_capacity=max_capacity,
        current_capacity=0,
    )


@pytest.fixture
def event_factory():
    """Factory building events with a given ceiling."""
    return make_event


@pytest_asyncio.fixture
async def open_event(db_session: AsyncSession) -> Event:
    """Create and return an event with a ceiling of 3."""
    event = make_event(max_capacity=3)
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def unbounded_event(db_session: AsyncSession) -> Event:
    """Create and return an event without a ceiling."""
    event = make_event(max_capacity=None, title="Science Trivia Night")
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


# ============================================================================
# Helper Functions
# ============================================================================

@pytest.fixture
def registration_form() -> dict:
    """Provide a valid event registration form body."""
    return {
        "name": "Ada Lovelace",
        "email": "ada@test.com",
        "externalId": "123456789",
        "program": "Computer Science",
        "year": 2,
    }


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """
    Configure pytest markers.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
