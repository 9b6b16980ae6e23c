"""Team roster service."""
import logging
from typing import Dict, List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.team import TeamMember


logger = logging.getLogger(__name__)


class TeamService:
    """Service for managing the executive team roster."""

    def __init__(self, session: AsyncSession):
        """Initialize team service."""
        self.session = session

    async def get_team_member(self, member_id: int) -> Optional[TeamMember]:
        """Get a team member by ID."""
        result = await self.session.execute(
            select(TeamMember).where(TeamMember.id == member_id)
        )
        return result.scalar_one_or_none()

    async def list_team_members(self, include_inactive: bool = False) -> List[TeamMember]:
        """List team members in display order."""
        query = select(TeamMember)
        if not include_inactive:
            query = query.where(TeamMember.is_active == True)
        query = query.order_by(TeamMember.display_order.asc(), TeamMember.id.asc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_team_member(self, **kwargs) -> TeamMember:
        """Add a member to the roster."""
        member = TeamMember(**kwargs)
        self.session.add(member)
        await self.session.commit()
        await self.session.refresh(member)
        logger.info("Added team member %s %s (%s)", member.first_name, member.last_name, member.role)
        return member

    async def update_team_member(self, member_id: int, **kwargs) -> Optional[TeamMember]:
        """
        Update a team member with the provided fields.

        Returns:
            Updated team member or None if not found
        """
        member = await self.get_team_member(member_id)
        if not member:
            return None

        for key, value in kwargs.items():
            if key != "id" and hasattr(member, key):
                setattr(member, key, value)

        await self.session.commit()
        await self.session.refresh(member)
        return member

    async def delete_team_member(self, member_id: int) -> bool:
        """
        Remove a member from the roster.

        Returns:
            True if deleted, False if not found
        """
        member = await self.get_team_member(member_id)
        if not member:
            return False

        await self.session.delete(member)
        await self.session.commit()
        logger.info("Deleted team member %d", member_id)
        return True

    async def toggle_status(self, member_id: int) -> Optional[TeamMember]:
        """Flip a member between shown and hidden."""
        member = await self.get_team_member(member_id)
        if not member:
            return None
        return await self.update_team_member(member_id, is_active=not member.is_active)

    async def reorder(self, orders: Dict[int, int]) -> List[int]:
        """
        Apply new display positions in one transaction.

        Args:
            orders: Mapping of team member ID to display order

        Returns:
            IDs that do not exist (nothing is changed when any are missing)
        """
        result = await self.session.execute(
            select(TeamMember).where(TeamMember.id.in_(list(orders.keys())))
        )
        members = {m.id: m for m in result.scalars().all()}

        missing = sorted(set(orders) - set(members))
        if missing:
            return missing

        for member_id, display_order in orders.items():
            members[member_id].display_order = display_order

        await self.session.commit()
        logger.info("Reordered %d team members", len(orders))
        return []

    async def get_team_statistics(self) -> dict:
        """Get roster totals."""
        total = (await self.session.execute(select(func.count(TeamMember.id)))).scalar() or 0
        active = (await self.session.execute(
            select(func.count(TeamMember.id)).where(TeamMember.is_active == True)
        )).scalar() or 0

        return {
            "total_members": total,
            "active_members": active,
            "inactive_members": total - active,
        }
