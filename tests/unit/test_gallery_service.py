"""
Unit tests for GalleryService.

Tests the media URL rule, event links, filtering and statistics.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.event import Event
from club_api.services.event_service import EventService
from club_api.services.exceptions import EventNotFoundError, ValidationError
from club_api.services.gallery_service import GalleryService


def photo(title: str, category: str = "EVENTS", **overrides) -> dict:
    fields = {
        "title": title,
        "description": "Members at the spring lab night.",
        "category": category,
        "tags": ["lab"],
        "image_url": f"https://media.example.com/{title.lower().replace(' ', '-')}.jpg",
    }
    fields.update(overrides)
    return fields


@pytest.mark.unit
@pytest.mark.asyncio
class TestGalleryItems:
    """Test adding and editing gallery items."""

    async def test_create_photo(self, db_session: AsyncSession, member_user):
        """Test a photo is stored with its uploader."""
        service = GalleryService(db_session)

        item = await service.create_item(uploaded_by_id=member_user.id, **photo("Lab night"))

        found = await service.get_item(item.id)
        assert found.title == "Lab night"
        assert found.media_type == "image"
        assert found.uploaded_by_id == member_user.id
        assert found.event is None

    async def test_create_video(self, db_session: AsyncSession):
        """Test a video item reports its media type."""
        service = GalleryService(db_session)

        item = await service.create_item(
            **photo("Robot race", image_url=None, video_url="https://media.example.com/race.mp4")
        )

        assert item.media_type == "video"

    @pytest.mark.parametrize("media", [
        {"image_url": None},
        {"video_url": "https://media.example.com/both.mp4"},
    ])
    async def test_create_requires_exactly_one_media_url(self, db_session: AsyncSession, media):
        """Test an item needs one image or one video, not none and not both."""
        service = GalleryService(db_session)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_item(**photo("Broken", **media))

        assert exc_info.value.status_code == 400
        assert (await service.list_items())[1] == 0

    async def test_create_linked_to_event(self, db_session: AsyncSession, open_event: Event):
        """Test an item can be linked to the event it was taken at."""
        service = GalleryService(db_session)

        item = await service.create_item(**photo("Safety goggles", event_id=open_event.id))

        assert item.event_id == open_event.id
        assert item.event.title == "Intro to Lab Safety"

    async def test_create_linked_to_missing_event(self, db_session: AsyncSession):
        """Test linking to an unknown event is refused."""
        service = GalleryService(db_session)

        with pytest.raises(EventNotFoundError):
            await service.create_item(**photo("Nowhere", event_id=99999))

    async def test_update_switches_media(self, db_session: AsyncSession):
        """Test a photo can be replaced by a video when the image url is cleared."""
        service = GalleryService(db_session)
        item = await service.create_item(**photo("Lab night"))

        updated = await service.update_item(
            item.id, image_url=None, video_url="https://media.example.com/lab-night.mp4"
        )

        assert updated.media_type == "video"
        assert updated.image_url is None

    async def test_update_cannot_drop_media(self, db_session: AsyncSession):
        """Test clearing the only media url is refused and nothing changes."""
        service = GalleryService(db_session)
        item = await service.create_item(**photo("Lab night"))

        with pytest.raises(ValidationError):
            await service.update_item(item.id, image_url=None, title="Renamed")

        found = await service.get_item(item.id)
        assert found.title == "Lab night"
        assert found.image_url is not None

    async def test_update_ignores_protected_fields(self, db_session: AsyncSession, member_user):
        """Test the uploader cannot be rewritten through an update."""
        service = GalleryService(db_session)
        item = await service.create_item(uploaded_by_id=member_user.id, **photo("Lab night"))

        updated = await service.update_item(item.id, uploaded_by_id=None, category="SOCIALS")

        assert updated.uploaded_by_id == member_user.id
        assert updated.category == "SOCIALS"

    async def test_update_and_delete_missing(self, db_session: AsyncSession):
        """Test missing items are reported as None or False."""
        service = GalleryService(db_session)

        assert await service.update_item(99999, title="Nothing") is None
        assert await service.delete_item(99999) is False

    async def test_delete(self, db_session: AsyncSession):
        """Test removing an item."""
        service = GalleryService(db_session)
        item = await service.create_item(**photo("Lab night"))

        assert await service.delete_item(item.id) is True
        assert await service.get_item(item.id) is None

    async def test_deleting_event_unlinks_items(self, db_session: AsyncSession, open_event: Event):
        """Test items outlive their event and lose the link."""
        service = GalleryService(db_session)
        item = await service.create_item(**photo("Safety goggles", event_id=open_event.id))

        assert await EventService(db_session).delete_event(open_event.id) is True

        await db_session.refresh(item)
        assert item.event_id is None
        assert item.event is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestGalleryQueries:
    """Test listing and statistics."""

    async def test_list_newest_first_with_filters(self, db_session: AsyncSession, open_event: Event):
        """Test filtering by category and event, newest first."""
        service = GalleryService(db_session)
        first = await service.create_item(**photo("First", event_id=open_event.id))
        await service.create_item(**photo("Second", category="SOCIALS"))
        third = await service.create_item(**photo("Third", event_id=open_event.id))

        items, total = await service.list_items()
        assert total == 3
        assert items[0].title == "Third"

        items, total = await service.list_items(category="SOCIALS")
        assert [i.title for i in items] == ["Second"]

        items, total = await service.list_items(event_id=open_event.id)
        assert [i.id for i in items] == [third.id, first.id]

    async def test_list_pagination(self, db_session: AsyncSession):
        """Test page slicing keeps the full total."""
        service = GalleryService(db_session)
        for n in range(5):
            await service.create_item(**photo(f"Photo {n}"))

        items, total = await service.list_items(page=2, page_size=2)

        assert total == 5
        assert [i.title for i in items] == ["Photo 2", "Photo 1"]

    async def test_statistics(self, db_session: AsyncSession):
        """Test totals per category."""
        service = GalleryService(db_session)
        await service.create_item(**photo("One"))
        await service.create_item(**photo("Two"))
        await service.create_item(**photo("Three", category="WORKSHOPS"))

        stats = await service.get_gallery_statistics()

        assert stats == {"total_items": 3, "items_by_category": {"EVENTS": 2, "WORKSHOPS": 1}}

    async def test_categories(self):
        assert GalleryService.categories() == [
            "EVENTS", "WORKSHOPS", "SOCIALS", "COMPETITIONS", "FIELD_TRIPS", "OTHER"
        ]
