"""Password hashing and session tokens."""
import secrets
from passlib.context import CryptContext

# Hashes made with older bcrypt settings are upgraded on the next sign-in
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=12,
    bcrypt__min_rounds=12,
)

SESSION_TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def password_needs_rehash(hashed_password: str) -> bool:
    """Whether a stored hash uses outdated settings."""
    return pwd_context.needs_update(hashed_password)


def generate_secure_token(nbytes: int = SESSION_TOKEN_BYTES) -> str:
    """URL-safe random token."""
    return secrets.token_urlsafe(nbytes)


def generate_session_token() -> str:
    """Opaque value stored in the session_token cookie."""
    return generate_secure_token(SESSION_TOKEN_BYTES)
