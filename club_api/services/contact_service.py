"""Contact form service."""
import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.contact import ContactMessage


logger = logging.getLogger(__name__)


FAQ = [
    {
        "question": "How do I join the club?",
        "answer": "Create an account on the website with your student number. Membership is free "
                  "and you can start registering for events right away.",
    },
    {
        "question": "What are the benefits of joining?",
        "answer": "Networking with other science students, leadership roles, hands-on workshops, "
                  "members-only events and a community of people who enjoy science.",
    },
    {
        "question": "How do I register for events?",
        "answer": "Open the event on the Events page, fill in the registration form with your name, "
                  "email, student number, program and year, and submit. A confirmation email follows.",
    },
    {
        "question": "Can I contribute to the blog?",
        "answer": "Yes. Signed-in members can submit posts for review, and mentors can publish "
                  "directly with the mentor access code.",
    },
    {
        "question": "What types of events do you host?",
        "answer": "Workshops, lectures, social events, competitions, field trips and conferences "
                  "across many scientific disciplines.",
    },
    {
        "question": "How can I get involved in leadership?",
        "answer": "Active members can apply for executive positions when they open. Reach out to "
                  "the current team through this contact form.",
    },
    {
        "question": "Is there a cost to join or attend events?",
        "answer": "Membership is free. Most events are free as well; some field trips or special "
                  "workshops may ask for a small fee to cover materials or transportation.",
    },
    {
        "question": "How do I stay updated on club activities?",
        "answer": "Follow the club on Instagram and LinkedIn and check the Events page and blog.",
    },
]


class ContactService:
    """Service for contact form messages."""

    def __init__(self, session: AsyncSession):
        """Initialize contact service."""
        self.session = session

    async def create_message(self, name: str, email: str, subject: str, message: str) -> ContactMessage:
        """Store a contact form submission."""
        contact = ContactMessage(
            name=name,
            email=email,
            subject=subject,
            message=message,
            is_read=False,
        )
        self.session.add(contact)
        await self.session.commit()
        await self.session.refresh(contact)
        logger.info("Contact message %d received from %s", contact.id, email)
        return contact

    async def get_message(self, message_id: int) -> Optional[ContactMessage]:
        """Get a message by ID."""
        result = await self.session.execute(
            select(ContactMessage).where(ContactMessage.id == message_id)
        )
        return result.scalar_one_or_none()

    async def list_messages(self, unread_only: bool = False) -> List[ContactMessage]:
        """List messages, newest first."""
        query = select(ContactMessage)
        if unread_only:
            query = query.where(ContactMessage.is_read == False)
        query = query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def mark_read(self, message_id: int) -> Optional[ContactMessage]:
        """Mark a message as read."""
        contact = await self.get_message(message_id)
        if not contact:
            return None

        contact.is_read = True
        await self.session.commit()
        await self.session.refresh(contact)
        return contact

    async def delete_message(self, message_id: int) -> bool:
        """
        Delete a message.

        Returns:
            True if deleted, False if not found
        """
        contact = await self.get_message(message_id)
        if not contact:
            return False

        await self.session.delete(contact)
        await self.session.commit()
        return True

    @staticmethod
    def get_faq() -> List[dict]:
        """Static frequently asked questions."""
        return [dict(item) for item in FAQ]
