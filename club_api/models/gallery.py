"""Photo and video gallery model."""
import enum
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from club_api.database import Base


class GalleryCategory(str, enum.Enum):
    """Section of the gallery an item is filed under."""
    EVENTS = "EVENTS"
    WORKSHOPS = "WORKSHOPS"
    SOCIALS = "SOCIALS"
    COMPETITIONS = "COMPETITIONS"
    FIELD_TRIPS = "FIELD_TRIPS"
    OTHER = "OTHER"


class GalleryItem(Base):
    """
    A photo or video from club life.

    The media itself lives at an external URL; exactly one of ``image_url``
    and ``video_url`` is set.
    """

    __tablename__ = "gallery_items"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    category = Column(String(20), default=GalleryCategory.OTHER.value, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)

    image_url = Column(String(500), nullable=True)
    video_url = Column(String(500), nullable=True)

    event_id = Column(Integer, ForeignKey('events.id', ondelete='SET NULL'), nullable=True, index=True)
    uploaded_by_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", lazy="selectin")

    @property
    def media_type(self) -> str:
        return "video" if self.video_url else "image"

    def __repr__(self):
        return f"<GalleryItem(id={self.id}, title={self.title}, category={self.category})>"
