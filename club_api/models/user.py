"""User/Member model."""
import enum
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from club_api.database import Base


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"  # Full access - events, registrations, roster, inbox
    MODERATOR = "moderator"  # Can post to the blog without review
    MEMBER = "member"  # Regular club member or event participant


class User(Base):
    """
    Club member and event participant.

    Participants who register for an event without an account are created
    lazily with no password; they can claim the account later by signing up
    with the same email.
    """

    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Natural keys
    email = Column(String(255), nullable=False)  # Original email for sending
    email_normalized = Column(String(255), unique=True, nullable=False, index=True)  # Normalized for lookups
    external_id = Column(String(20), unique=True, nullable=True, index=True)  # Student number

    # Basic Information
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, default="")
    program = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)

    # Role and Permissions
    role = Column(
        String(20),
        default=UserRole.MEMBER.value,
        nullable=False,
        index=True
    )

    # Credentials (null until the member signs up)
    password_hash = Column(String(255), nullable=True)

    # Account Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    registrations = relationship(
        "EventRegistration",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_users_email', 'email'),
    )

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN.value

    @property
    def is_moderator_role(self) -> bool:
        """Check if user has moderator role (or higher)."""
        return self.role in (UserRole.ADMIN.value, UserRole.MODERATOR.value)

    @property
    def has_account(self) -> bool:
        """Whether the member has set a password and can sign in."""
        return self.password_hash is not None

    @property
    def full_name(self) -> str:
        """Get user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
