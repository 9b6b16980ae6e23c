"""Team roster API routes."""
from typing import List
from fastapi import APIRouter, Depends, status

from club_api.dependencies import get_current_admin_user
from club_api.api.exceptions import not_found
from club_api.api.utils.dependencies import get_team_service
from club_api.models.user import User
from club_api.services.team_service import TeamService
from club_api.schemas.member import MessageResponse
from club_api.schemas.team import (
    TeamMemberCreate,
    TeamMemberUpdate,
    TeamMemberResponse,
    TeamReorderRequest,
    TeamStatsResponse,
)

router = APIRouter(prefix="/api/team", tags=["Team"])

# Fields an update may clear by sending null
_NULLABLE_FIELDS = {"image_url", "linkedin_url", "instagram_url"}


@router.get("", response_model=List[TeamMemberResponse])
async def list_team(service: TeamService = Depends(get_team_service)):
    """List active team members in display order."""
    return await service.list_team_members()


@router.get("/stats/overview", response_model=TeamStatsResponse)
async def get_team_stats(service: TeamService = Depends(get_team_service)):
    """Roster totals."""
    return TeamStatsResponse(**await service.get_team_statistics())


@router.patch("/reorder", response_model=MessageResponse)
async def reorder_team(
    data: TeamReorderRequest,
    current_user: User = Depends(get_current_admin_user),
    service: TeamService = Depends(get_team_service)
):
    """Set display positions for several members at once. Admin only."""
    missing = await service.reorder({item.id: item.display_order for item in data.members})
    if missing:
        raise not_found(f"Team members {', '.join(str(i) for i in missing)}")

    return MessageResponse(message="Team member order updated successfully")


@router.get("/{member_id}", response_model=TeamMemberResponse)
async def get_team_member(
    member_id: int,
    service: TeamService = Depends(get_team_service)
):
    """Get a team member by ID."""
    member = await service.get_team_member(member_id)
    if not member:
        raise not_found("Team member", member_id)
    return member


@router.post("", response_model=TeamMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_team_member(
    data: TeamMemberCreate,
    current_user: User = Depends(get_current_admin_user),
    service: TeamService = Depends(get_team_service)
):
    """Add a team member. Admin only."""
    return await service.create_team_member(**data.model_dump())


@router.put("/{member_id}", response_model=TeamMemberResponse)
async def update_team_member(
    member_id: int,
    data: TeamMemberUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: TeamService = Depends(get_team_service)
):
    """Update a team member. Admin only."""
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE_FIELDS
    }
    member = await service.update_team_member(member_id, **updates)
    if not member:
        raise not_found("Team member", member_id)
    return member


@router.delete("/{member_id}", response_model=MessageResponse)
async def delete_team_member(
    member_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: TeamService = Depends(get_team_service)
):
    """Remove a team member. Admin only."""
    if not await service.delete_team_member(member_id):
        raise not_found("Team member", member_id)
    return MessageResponse(message="Team member deleted successfully")


@router.patch("/{member_id}/toggle-status", response_model=TeamMemberResponse)
async def toggle_team_member_status(
    member_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: TeamService = Depends(get_team_service)
):
    """Show or hide a team member. Admin only."""
    member = await service.toggle_status(member_id)
    if not member:
        raise not_found("Team member", member_id)
    return member
