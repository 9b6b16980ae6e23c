"""Contact form API routes."""
import logging
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, status

from club_api.dependencies import get_current_admin_user
from club_api.api.exceptions import not_found
from club_api.api.utils.dependencies import get_contact_service
from club_api.models.user import User
from club_api.services.contact_service import ContactService
from club_api.services.notification_service import NotificationService, get_notification_service
from club_api.schemas.member import MessageResponse
from club_api.schemas.contact import (
    ContactRequest,
    ContactMessageResponse,
    ContactSubmittedResponse,
    FAQItem,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", response_model=ContactSubmittedResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact_form(
    data: ContactRequest,
    background_tasks: BackgroundTasks,
    service: ContactService = Depends(get_contact_service),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Send a message to the club. The club inbox is notified by email."""
    contact = await service.create_message(
        name=data.name,
        email=data.email,
        subject=data.subject,
        message=data.message
    )

    background_tasks.add_task(
        notifier.send_contact_notification,
        contact.name,
        contact.email,
        contact.subject,
        contact.message
    )

    return ContactSubmittedResponse(
        message="Message sent successfully. We'll get back to you soon!",
        id=contact.id
    )


@router.get("/faq", response_model=List[FAQItem])
async def get_faq():
    """Frequently asked questions."""
    return ContactService.get_faq()


@router.get("", response_model=List[ContactMessageResponse])
async def list_messages(
    unread_only: bool = False,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    """List contact messages, newest first. Admin only."""
    return await service.list_messages(unread_only=unread_only)


@router.patch("/{message_id}/read", response_model=ContactMessageResponse)
async def mark_message_read(
    message_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    """Mark a message as read. Admin only."""
    contact = await service.mark_read(message_id)
    if not contact:
        raise not_found("Message", message_id)
    return contact


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    """Delete a message. Admin only."""
    if not await service.delete_message(message_id):
        raise not_found("Message", message_id)
    return MessageResponse(message="Message deleted successfully")
