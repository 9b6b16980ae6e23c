"""Application configuration management."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./club.db"

    @property
    def async_database_url(self) -> str:
        """Get DATABASE_URL with an async driver for async SQLAlchemy.

        Converts postgresql:// to postgresql+asyncpg:// and sqlite:// to
        sqlite+aiosqlite:// so a plain URL can be provided.
        """
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        if self.DATABASE_URL.startswith("sqlite://"):
            return self.DATABASE_URL.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return self.DATABASE_URL

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    # Application
    ENVIRONMENT: str = "development"  # development, staging, or production
    SECRET_KEY: str = ""
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:4200", "http://localhost:3000"]
    FRONTEND_URL: str = "http://localhost:4200"  # Base URL for links in emails

    # Default Admin User (optional - created on startup when no admin exists)
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_FIRST_NAME: str = "Club"
    ADMIN_LAST_NAME: str = "Admin"

    # SendGrid (optional - notifications are skipped without an API key)
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = ""
    SENDGRID_FROM_NAME: str = "Science Club"
    SENDGRID_SANDBOX_MODE: bool = False
    CONTACT_NOTIFY_EMAIL: str = ""  # Where contact form submissions are forwarded

    # Session Configuration
    SESSION_EXPIRY_HOURS: int = 24
    SESSION_CLEANUP_INTERVAL_MINUTES: int = 60

    # Login rate limiting (per client IP)
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW_MINUTES: int = 15

    # Blog
    MENTOR_ACCESS_CODE: str = "SSC2024MENTOR"
    BLOG_DATA_DIR: str = "data"

    # Background jobs
    SCHEDULER_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
