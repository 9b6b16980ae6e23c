"""Pydantic schemas for the contact form."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class ContactRequest(BaseModel):
    """Public contact form submission."""
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    subject: str = Field(..., min_length=5, max_length=100)
    message: str = Field(..., min_length=10, max_length=1000)

    model_config = {"str_strip_whitespace": True}


class ContactMessageResponse(BaseModel):
    """Stored contact message."""
    id: int
    name: str
    email: str
    subject: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ContactSubmittedResponse(BaseModel):
    """Acknowledgement returned to the sender."""
    message: str
    id: int


class FAQItem(BaseModel):
    """One frequently asked question."""
    question: str
    answer: str
