"""Participant service for identity resolution and member management."""
import logging
from dataclasses import dataclass
from typing import Optional, List, Tuple
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.user import User, UserRole
from club_api.api.utils.validation import normalize_email, normalize_external_id, check_display_name
from club_api.services.exceptions import ValidationError


logger = logging.getLogger(__name__)


@dataclass
class ParticipantInfo:
    """Identity and profile details submitted with an event registration."""
    display_name: str
    email: str
    external_id: str
    program: str
    year: int


class ParticipantService:
    """Service for resolving participants and managing member accounts."""

    def __init__(self, session: AsyncSession):
        """Initialize participant service."""
        self.session = session

    # ============== Lookups ==============

    async def get_member(self, user_id: int) -> Optional[User]:
        """Get a member by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a member by email (normalized before lookup)."""
        result = await self.session.execute(
            select(User).where(User.email_normalized == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        """Get a member by student number."""
        result = await self.session.execute(
            select(User).where(User.external_id == normalize_external_id(external_id))
        )
        return result.scalar_one_or_none()

    # ============== Identity Resolution ==============

    async def find_participant(self, email: str, external_id: str) -> Optional[User]:
        """
        Find an existing participant by natural key.

        Email wins over student number: if the email belongs to one account
        and the student number to another, the email account is returned.
        """
        user = await self.get_by_email(email)
        if user:
            return user
        return await self.get_by_external_id(external_id)

    async def resolve_participant(self, info: ParticipantInfo) -> Tuple[User, bool]:
        """
        Resolve the participant for a registration, creating it if unknown.

        Resolution order: match by email, else by student number, else create
        a new member without a password. The insert runs in a savepoint so a
        concurrent creation of the same participant is picked up instead of
        failing the enclosing transaction.

        Returns:
            Tuple of (user, created)
        """
        user = await self.find_participant(info.email, info.external_id)
        if user:
            return user, False

        try:
            first_name, last_name = check_display_name(info.display_name)
        except ValueError as e:
            raise ValidationError(str(e))

        user = User(
            email=info.email.strip(),
            email_normalized=normalize_email(info.email),
            external_id=normalize_external_id(info.external_id),
            first_name=first_name,
            last_name=last_name,
            program=info.program,
            year=info.year,
            role=UserRole.MEMBER.value,
            is_active=True,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(user)
        except IntegrityError:
            logger.info(
                "Participant %s was created concurrently, reusing existing record",
                info.email
            )
            existing = await self.find_participant(info.email, info.external_id)
            if existing is None:
                raise
            return existing, False

        logger.info("Created participant %s (id=%d)", user.email, user.id)
        return user, True

    # ============== Member Management ==============

    async def create_member(
        self,
        email: str,
        first_name: str,
        last_name: str,
        external_id: str,
        program: str,
        year: int,
        password_hash: str,
        role: str = UserRole.MEMBER.value,
    ) -> User:
        """Create a member account that can sign in."""
        user = User(
            email=email.strip(),
            email_normalized=normalize_email(email),
            external_id=normalize_external_id(external_id),
            first_name=first_name,
            last_name=last_name,
            program=program,
            year=year,
            role=role,
            password_hash=password_hash,
            is_active=True,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        logger.info("Created member account %s (id=%d)", user.email, user.id)
        return user

    async def sign_up(
        self,
        email: str,
        first_name: str,
        last_name: str,
        external_id: str,
        program: str,
        year: int,
        password_hash: str,
    ) -> Optional[User]:
        """
        Create a member account, or claim the participant record that event
        registration created for the same email.

        Returns:
            The account, or None if the email or student number already
            belongs to an account that can sign in (or to another person)
        """
        existing = await self.get_by_email(email)
        if existing and existing.has_account:
            return None

        owner = await self.get_by_external_id(external_id)
        if owner and (existing is None or owner.id != existing.id):
            return None

        if existing is None:
            try:
                return await self.create_member(
                    email=email,
                    first_name=first_name,
                    last_name=last_name,
                    external_id=external_id,
                    program=program,
                    year=year,
                    password_hash=password_hash,
                )
            except IntegrityError:
                await self.session.rollback()
                return None

        user = await self.update_member(
            existing.id,
            first_name=first_name,
            last_name=last_name,
            external_id=normalize_external_id(external_id),
            program=program,
            year=year,
            password_hash=password_hash,
        )
        logger.info("Participant %d claimed their account", user.id)
        return user

    async def list_members(
        self,
        page: int = 1,
        page_size: int = 20,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None
    ) -> Tuple[List[User], int]:
        """List members with filtering and pagination."""
        query = select(User)
        count_query = select(func.count(User.id))

        if role is not None:
            query = query.where(User.role == role)
            count_query = count_query.where(User.role == role)

        if is_active is not None:
            query = query.where(User.is_active == is_active)
            count_query = count_query.where(User.is_active == is_active)

        if search:
            search_filter = or_(
                User.first_name.ilike(f"%{search}%"),
                User.last_name.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%"),
                User.external_id.ilike(f"%{search}%")
            )
            query = query.where(search_filter)
            count_query = count_query.where(search_filter)

        total = (await self.session.execute(count_query)).scalar() or 0

        offset = (page - 1) * page_size
        query = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(page_size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def update_member(self, user_id: int, **kwargs) -> Optional[User]:
        """
        Update a member with the provided fields.

        Returns:
            Updated member or None if not found
        """
        user = await self.get_member(user_id)
        if not user:
            return None

        for key, value in kwargs.items():
            if hasattr(user, key):
                setattr(user, key, value)

        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def set_active(self, user_id: int, is_active: bool) -> Optional[User]:
        """Activate or deactivate a member account."""
        return await self.update_member(user_id, is_active=is_active)

    async def get_member_statistics(self) -> dict:
        """Get totals for the member overview."""
        total = (await self.session.execute(select(func.count(User.id)))).scalar() or 0
        active = (await self.session.execute(
            select(func.count(User.id)).where(User.is_active == True)
        )).scalar() or 0

        result = await self.session.execute(
            select(User.role, func.count(User.id).label('count')).group_by(User.role)
        )
        by_role = {row.role: row.count for row in result.all()}

        return {
            "total_members": total,
            "active_members": active,
            "members_by_role": by_role,
        }
