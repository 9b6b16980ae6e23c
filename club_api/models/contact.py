"""Contact form message model."""
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, Text
from sqlalchemy.sql import func
from club_api.database import Base


class ContactMessage(Base):
    """Message submitted through the public contact form."""

    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<ContactMessage(id={self.id}, email={self.email}, read={self.is_read})>"
