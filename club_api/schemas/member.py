"""Pydantic schemas for member management."""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from club_api.models.user import UserRole
from club_api.schemas.auth import UserResponse
from club_api.schemas.event import Pagination


class ProfileUpdate(BaseModel):
    """Fields members may change on their own profile."""
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    program: Optional[str] = Field(None, min_length=2, max_length=100)
    year: Optional[int] = Field(None, ge=1, le=4)

    model_config = {"str_strip_whitespace": True}


class MemberUpdate(ProfileUpdate):
    """Fields admins may change on any member."""
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    model_config = {"str_strip_whitespace": True, "use_enum_values": True}


class MemberListResponse(BaseModel):
    """Paginated member list."""
    members: List[UserResponse]
    total: int
    pagination: Pagination


class MemberStatsResponse(BaseModel):
    """Member totals."""
    total_members: int
    active_members: int
    members_by_role: Dict[str, int]


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
