"""Pydantic schemas for the blog."""
from datetime import datetime
from typing import Optional, List, Union
from pydantic import BaseModel, Field

from club_api.schemas.event import Pagination


class BlogPostCreate(BaseModel):
    """Post written by a signed-in member."""
    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=100)
    excerpt: str = Field(..., min_length=20, max_length=300)
    tags: List[str] = Field(..., min_length=1)
    image_url: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True}


class SimpleBlogPostCreate(BaseModel):
    """Post submitted with the mentor access code."""
    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=10)
    excerpt: str = Field(..., min_length=10, max_length=300)
    tags: List[str] = Field(..., min_length=1)
    image_url: Optional[str] = Field(None, alias="imageUrl", max_length=500)
    author: str = Field(..., min_length=1, max_length=120)
    access_code: str = Field(..., alias="accessCode", min_length=1)

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True
    }


class BlogPostUpdate(BaseModel):
    """Schema for updating a post."""
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    content: Optional[str] = Field(None, min_length=100)
    excerpt: Optional[str] = Field(None, min_length=20, max_length=300)
    tags: Optional[List[str]] = Field(None, min_length=1)
    image_url: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True}


class PublishRequest(BaseModel):
    """Publish or unpublish a post."""
    is_published: bool = Field(..., alias="isPublished")

    model_config = {"populate_by_name": True}


class BlogPostResponse(BaseModel):
    """Blog post response schema (database or file store)."""
    id: Union[int, str]
    title: str
    content: str
    excerpt: str
    tags: List[str] = []
    image_url: Optional[str] = None
    author: str
    author_id: Optional[int] = None
    is_published: bool
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BlogPostListResponse(BaseModel):
    """Paginated list of published posts."""
    posts: List[BlogPostResponse]
    pagination: Pagination
