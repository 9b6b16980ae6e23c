"""Gallery service for the club's photo and video catalogue."""
import logging
from typing import List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.event import Event
from club_api.models.gallery import GalleryItem, GalleryCategory
from club_api.services.exceptions import EventNotFoundError, ValidationError


logger = logging.getLogger(__name__)

_PROTECTED_FIELDS = {"id", "uploaded_by_id", "created_at", "updated_at"}


def _check_media(image_url: Optional[str], video_url: Optional[str]) -> None:
    if bool(image_url) == bool(video_url):
        raise ValidationError("Exactly one of image_url and video_url is required")


class GalleryService:
    """Service for managing gallery items."""

    def __init__(self, session: AsyncSession):
        """Initialize gallery service."""
        self.session = session

    @staticmethod
    def categories() -> List[str]:
        """All gallery categories, in display order."""
        return [category.value for category in GalleryCategory]

    async def get_item(self, item_id: int) -> Optional[GalleryItem]:
        """Get a gallery item by ID."""
        result = await self.session.execute(
            select(GalleryItem).where(GalleryItem.id == item_id)
        )
        return result.scalar_one_or_none()

    async def list_items(
        self,
        category: Optional[str] = None,
        event_id: Optional[int] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[GalleryItem], int]:
        """
        List gallery items, newest first.

        Returns:
            Tuple of (items, total matching items)
        """
        query = select(GalleryItem)
        count_query = select(func.count(GalleryItem.id))

        if category:
            query = query.where(GalleryItem.category == category)
            count_query = count_query.where(GalleryItem.category == category)

        if event_id is not None:
            query = query.where(GalleryItem.event_id == event_id)
            count_query = count_query.where(GalleryItem.event_id == event_id)

        total = (await self.session.execute(count_query)).scalar() or 0

        offset = (page - 1) * page_size
        query = query.order_by(
            GalleryItem.created_at.desc(), GalleryItem.id.desc()
        ).offset(offset).limit(page_size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def create_item(self, uploaded_by_id: Optional[int] = None, **kwargs) -> GalleryItem:
        """
        Add an item to the gallery.

        Raises:
            ValidationError: Not exactly one media URL was given
            EventNotFoundError: The linked event does not exist
        """
        _check_media(kwargs.get("image_url"), kwargs.get("video_url"))
        if kwargs.get("event_id") is not None:
            await self._require_event(kwargs["event_id"])

        item = GalleryItem(uploaded_by_id=uploaded_by_id, **kwargs)
        self.session.add(item)
        await self.session.commit()
        await self.session.refresh(item)
        logger.info("Added gallery item %d (%s) by user %s", item.id, item.category, uploaded_by_id)
        return item

    async def update_item(self, item_id: int, **kwargs) -> Optional[GalleryItem]:
        """
        Update the metadata of a gallery item.

        Returns:
            Updated item or None if not found

        Raises:
            ValidationError: The update would leave not exactly one media URL
            EventNotFoundError: The linked event does not exist
        """
        item = await self.get_item(item_id)
        if not item:
            return None

        updates = {k: v for k, v in kwargs.items() if k not in _PROTECTED_FIELDS and hasattr(item, k)}

        _check_media(
            updates.get("image_url", item.image_url),
            updates.get("video_url", item.video_url)
        )
        if updates.get("event_id") is not None:
            await self._require_event(updates["event_id"])

        for key, value in updates.items():
            setattr(item, key, value)

        await self.session.commit()
        await self.session.refresh(item)
        return item

    async def delete_item(self, item_id: int) -> bool:
        """
        Remove an item from the gallery.

        Returns:
            True if deleted, False if not found
        """
        item = await self.get_item(item_id)
        if not item:
            return False

        await self.session.delete(item)
        await self.session.commit()
        logger.info("Deleted gallery item %d", item_id)
        return True

    async def get_gallery_statistics(self) -> dict:
        """Item totals, overall and per category."""
        total = (await self.session.execute(select(func.count(GalleryItem.id)))).scalar() or 0

        result = await self.session.execute(
            select(GalleryItem.category, func.count(GalleryItem.id).label('count'))
            .group_by(GalleryItem.category)
        )
        by_category = {row.category: row.count for row in result.all()}

        return {
            "total_items": total,
            "items_by_category": by_category,
        }

    async def _require_event(self, event_id: int) -> None:
        result = await self.session.execute(select(Event.id).where(Event.id == event_id))
        if result.scalar_one_or_none() is None:
            raise EventNotFoundError()
