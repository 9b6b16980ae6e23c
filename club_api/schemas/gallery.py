"""Pydantic schemas for the gallery."""
from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from club_api.models.gallery import GalleryCategory
from club_api.schemas.event import Pagination


class GalleryItemCreate(BaseModel):
    """
    Schema for adding a gallery item.

    Exactly one of ``image_url`` and ``video_url`` must be given.
    """
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: GalleryCategory
    tags: List[str] = []
    event_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True, "use_enum_values": True}


class GalleryItemUpdate(BaseModel):
    """Schema for updating gallery item metadata."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[GalleryCategory] = None
    tags: Optional[List[str]] = None
    event_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True, "use_enum_values": True}


class GalleryEventBrief(BaseModel):
    """The event a gallery item was taken at."""
    id: int
    title: str
    date: datetime

    model_config = {
        "from_attributes": True
    }


class GalleryItemResponse(BaseModel):
    """Gallery item response schema."""
    id: int
    title: str
    description: Optional[str] = None
    category: str
    tags: List[str] = []
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    media_type: str
    event_id: Optional[int] = None
    event: Optional[GalleryEventBrief] = None
    uploaded_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class GalleryListResponse(BaseModel):
    """Response for the gallery list."""
    items: List[GalleryItemResponse]
    pagination: Pagination


class GalleryStatsResponse(BaseModel):
    """Item totals."""
    total_items: int
    items_by_category: Dict[str, int]
