"""Blog API routes."""
import logging
import secrets
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from club_api.config import Settings, get_settings
from club_api.dependencies import get_current_active_user, get_current_admin_user
from club_api.api.exceptions import not_found, forbidden, unauthorized
from club_api.api.utils.dependencies import get_blog_service
from club_api.api.utils.pagination import build_pagination
from club_api.models.blog import BlogPost
from club_api.models.user import User
from club_api.services.blog_service import BlogService, post_to_dict
from club_api.schemas.member import MessageResponse
from club_api.schemas.blog import (
    BlogPostCreate,
    SimpleBlogPostCreate,
    BlogPostUpdate,
    PublishRequest,
    BlogPostResponse,
    BlogPostListResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/blog", tags=["Blog"])


async def _get_editable_post(post_id: int, user: User, service: BlogService) -> BlogPost:
    post = await service.get_post_model(post_id)
    if not post:
        raise not_found("Blog post", post_id)
    if not service.can_edit(user, post):
        raise forbidden("Not authorized to edit this post")
    return post


@router.get("", response_model=BlogPostListResponse)
async def list_posts(
    tag: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: BlogService = Depends(get_blog_service)
):
    """List published posts, newest first."""
    posts, total = await service.list_posts(tag=tag, page=page, page_size=limit)
    return BlogPostListResponse(
        posts=posts,
        pagination=build_pagination(total, page, limit)
    )


@router.get("/tags/all", response_model=List[str])
async def list_tags(service: BlogService = Depends(get_blog_service)):
    """Distinct tags of published posts."""
    return await service.get_all_tags()


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(
    post_id: str,
    service: BlogService = Depends(get_blog_service)
):
    """Get a published post by ID (numeric or file-store id)."""
    post = await service.get_post(post_id)
    if not post:
        raise not_found("Blog post")
    return post


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: BlogPostCreate,
    current_user: User = Depends(get_current_active_user),
    service: BlogService = Depends(get_blog_service)
):
    """
    Write a post as the signed-in member.

    Posts by admins and moderators are published right away; other posts
    wait for an admin.
    """
    post = await service.create_post(
        author=current_user,
        title=data.title,
        content=data.content,
        excerpt=data.excerpt,
        tags=data.tags,
        image_url=data.image_url
    )
    return post_to_dict(post)


@router.post("/simple", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_simple_post(
    data: SimpleBlogPostCreate,
    service: BlogService = Depends(get_blog_service),
    settings: Settings = Depends(get_settings)
):
    """
    Publish a post with the mentor access code, no account needed.

    Stored in the blog file when the database is unreachable.
    """
    if not secrets.compare_digest(data.access_code.encode(), settings.MENTOR_ACCESS_CODE.encode()):
        raise unauthorized("Invalid access code")

    return await service.create_simple_post(
        author_name=data.author,
        title=data.title,
        content=data.content,
        excerpt=data.excerpt,
        tags=data.tags,
        image_url=data.image_url
    )


@router.put("/{post_id}", response_model=BlogPostResponse)
async def update_post(
    post_id: int,
    data: BlogPostUpdate,
    current_user: User = Depends(get_current_active_user),
    service: BlogService = Depends(get_blog_service)
):
    """Edit a post. Authors may edit their own posts; admins any post."""
    post = await _get_editable_post(post_id, current_user, service)
    post = await service.update_post(post, **data.model_dump(exclude_unset=True, exclude_none=True))
    return post_to_dict(post)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    service: BlogService = Depends(get_blog_service)
):
    """Delete a post. Authors may delete their own posts; admins any post."""
    post = await _get_editable_post(post_id, current_user, service)
    await service.delete_post(post)
    return MessageResponse(message="Blog post deleted successfully")


@router.patch("/{post_id}/publish", response_model=BlogPostResponse)
async def publish_post(
    post_id: int,
    data: PublishRequest,
    current_user: User = Depends(get_current_admin_user),
    service: BlogService = Depends(get_blog_service)
):
    """Publish or unpublish a post. Admin only."""
    post = await service.get_post_model(post_id)
    if not post:
        raise not_found("Blog post", post_id)

    post = await service.set_published(post, data.is_published)
    return post_to_dict(post)
