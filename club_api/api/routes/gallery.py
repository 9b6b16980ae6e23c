"""Gallery API routes."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from club_api.dependencies import get_current_active_user, get_current_admin_user
from club_api.api.exceptions import not_found
from club_api.api.utils.dependencies import get_gallery_service
from club_api.api.utils.pagination import build_pagination
from club_api.models.gallery import GalleryCategory
from club_api.models.user import User
from club_api.services.gallery_service import GalleryService
from club_api.schemas.member import MessageResponse
from club_api.schemas.gallery import (
    GalleryItemCreate,
    GalleryItemUpdate,
    GalleryItemResponse,
    GalleryListResponse,
    GalleryStatsResponse,
)

router = APIRouter(prefix="/api/gallery", tags=["Gallery"])

# Fields an update may clear by sending null
_NULLABLE_FIELDS = {"description", "event_id", "image_url", "video_url"}


@router.get("", response_model=GalleryListResponse)
async def list_gallery(
    category: Optional[GalleryCategory] = None,
    event_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: GalleryService = Depends(get_gallery_service)
):
    """List gallery items, newest first, optionally for one category or event."""
    items, total = await service.list_items(
        category=category.value if category else None,
        event_id=event_id,
        page=page,
        page_size=limit
    )

    return GalleryListResponse(
        items=[GalleryItemResponse.model_validate(item) for item in items],
        pagination=build_pagination(total, page, limit)
    )


@router.get("/categories/all", response_model=List[str])
async def list_gallery_categories():
    """Gallery categories."""
    return GalleryService.categories()


@router.get("/stats/overview", response_model=GalleryStatsResponse)
async def get_gallery_stats(service: GalleryService = Depends(get_gallery_service)):
    """Item totals, overall and per category."""
    return GalleryStatsResponse(**await service.get_gallery_statistics())


@router.get("/{item_id}", response_model=GalleryItemResponse)
async def get_gallery_item(
    item_id: int,
    service: GalleryService = Depends(get_gallery_service)
):
    """Get a gallery item by ID."""
    item = await service.get_item(item_id)
    if not item:
        raise not_found("Gallery item", item_id)
    return item


@router.post("", response_model=GalleryItemResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    data: GalleryItemCreate,
    current_user: User = Depends(get_current_active_user),
    service: GalleryService = Depends(get_gallery_service)
):
    """Add a photo or video by URL. Any signed-in member may contribute."""
    return await service.create_item(uploaded_by_id=current_user.id, **data.model_dump())


@router.put("/{item_id}", response_model=GalleryItemResponse)
async def update_gallery_item(
    item_id: int,
    data: GalleryItemUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    """Update gallery item metadata. Admin only."""
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE_FIELDS
    }
    item = await service.update_item(item_id, **updates)
    if not item:
        raise not_found("Gallery item", item_id)
    return item


@router.delete("/{item_id}", response_model=MessageResponse)
async def delete_gallery_item(
    item_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: GalleryService = Depends(get_gallery_service)
):
    """Remove a gallery item. Admin only."""
    if not await service.delete_item(item_id):
        raise not_found("Gallery item", item_id)
    return MessageResponse(message="Gallery item deleted successfully")
