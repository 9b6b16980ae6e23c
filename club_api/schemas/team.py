"""Pydantic schemas for the team roster."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class TeamMemberBase(BaseModel):
    """Base team member schema."""
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    role: str = Field(..., min_length=3, max_length=100)
    bio: str = Field(..., min_length=20, max_length=500)
    image_url: Optional[str] = Field(None, max_length=500)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    instagram_url: Optional[str] = Field(None, max_length=500)
    display_order: int = Field(0, ge=0)

    model_config = {"str_strip_whitespace": True}


class TeamMemberCreate(TeamMemberBase):
    """Schema for adding a team member."""
    is_active: bool = True


class TeamMemberUpdate(BaseModel):
    """Schema for updating a team member."""
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    role: Optional[str] = Field(None, min_length=3, max_length=100)
    bio: Optional[str] = Field(None, min_length=20, max_length=500)
    image_url: Optional[str] = Field(None, max_length=500)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    instagram_url: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}


class TeamMemberResponse(BaseModel):
    """Team member response schema."""
    id: int
    first_name: str
    last_name: str
    role: str
    bio: str
    image_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    instagram_url: Optional[str] = None
    display_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class TeamOrderItem(BaseModel):
    """New display position for one team member."""
    id: int
    display_order: int = Field(..., ge=0)


class TeamReorderRequest(BaseModel):
    """Batch of display positions."""
    members: List[TeamOrderItem] = Field(..., min_length=1)


class TeamStatsResponse(BaseModel):
    """Roster totals."""
    total_members: int
    active_members: int
    inactive_members: int
