"""Member management API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from club_api.dependencies import get_current_active_user, get_current_admin_user
from club_api.api.exceptions import not_found, bad_request
from club_api.api.utils.dependencies import get_participant_service
from club_api.api.utils.pagination import build_pagination
from club_api.models.user import User, UserRole
from club_api.services.participant_service import ParticipantService
from club_api.schemas.auth import UserResponse
from club_api.schemas.member import (
    ProfileUpdate,
    MemberUpdate,
    MemberListResponse,
    MemberStatsResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/members", tags=["Members"])


@router.get("", response_model=MemberListResponse)
async def list_members(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_admin_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """List members with filtering and pagination. Admin only."""
    members, total = await service.list_members(
        page=page,
        page_size=limit,
        role=role.value if role else None,
        is_active=is_active,
        search=search
    )

    return MemberListResponse(
        members=[UserResponse.model_validate(m) for m in members],
        total=total,
        pagination=build_pagination(total, page, limit)
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: User = Depends(get_current_active_user)
):
    """Get the signed-in member's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Update the signed-in member's names, program and year."""
    user = await service.update_member(current_user.id, **data.model_dump(exclude_unset=True, exclude_none=True))
    return UserResponse.model_validate(user)


@router.patch("/deactivate", response_model=MessageResponse)
async def deactivate_account(
    current_user: User = Depends(get_current_active_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Deactivate the signed-in member's own account."""
    await service.set_active(current_user.id, False)
    logger.info("Member %d deactivated their account", current_user.id)
    return MessageResponse(message="Account deactivated successfully")


@router.get("/stats/overview", response_model=MemberStatsResponse)
async def get_member_stats(
    current_user: User = Depends(get_current_admin_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Member totals. Admin only."""
    return MemberStatsResponse(**await service.get_member_statistics())


@router.get("/{member_id}", response_model=UserResponse)
async def get_member(
    member_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Get a member by ID. Admin only."""
    member = await service.get_member(member_id)
    if not member:
        raise not_found("Member", member_id)

    return UserResponse.model_validate(member)


@router.put("/{member_id}", response_model=UserResponse)
async def update_member(
    member_id: int,
    data: MemberUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Update any member, including role and active flag. Admin only."""
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if member_id == current_user.id and updates.get("role", UserRole.ADMIN.value) != UserRole.ADMIN.value:
        raise bad_request("Cannot remove your own admin role")

    member = await service.update_member(member_id, **updates)
    if not member:
        raise not_found("Member", member_id)

    return UserResponse.model_validate(member)


@router.patch("/{member_id}/reactivate", response_model=UserResponse)
async def reactivate_member(
    member_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ParticipantService = Depends(get_participant_service)
):
    """Reactivate a deactivated member. Admin only."""
    member = await service.set_active(member_id, True)
    if not member:
        raise not_found("Member", member_id)

    return UserResponse.model_validate(member)
