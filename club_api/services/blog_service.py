"""Blog service.

Database posts and posts kept in the file store are served together. When
the database cannot be reached, reads fall back to the file store alone and
access-code posts are written to the file store instead.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.blog import BlogPost
from club_api.models.user import User
from club_api.services.blog_store import BlogFileStore
from club_api.utils.dates import as_utc, utc_now


logger = logging.getLogger(__name__)

# Errors that mean the database is unreachable rather than the query being wrong
DATABASE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, OSError)

_EDITABLE_FIELDS = {"title", "content", "excerpt", "tags", "image_url"}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def post_to_dict(post: BlogPost) -> dict:
    """Render a database post in the same shape as file store posts."""
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "excerpt": post.excerpt,
        "tags": list(post.tags or []),
        "image_url": post.image_url,
        "author": post.display_author,
        "author_id": post.author_id,
        "is_published": post.is_published,
        "published_at": as_utc(post.published_at) if post.published_at else None,
        "created_at": as_utc(post.created_at) if post.created_at else None,
        "updated_at": as_utc(post.updated_at) if post.updated_at else None,
    }


def _newest_first(posts: List[dict]) -> List[dict]:
    return sorted(posts, key=lambda p: p.get("published_at") or _OLDEST, reverse=True)


class BlogService:
    """Service for blog posts."""

    def __init__(self, session: AsyncSession, store: BlogFileStore):
        """Initialize blog service."""
        self.session = session
        self.store = store

    async def _database_unavailable(self, error: Exception, action: str) -> None:
        logger.warning("Database unavailable while %s, using file store: %s", action, error)
        await self.session.rollback()

    # ============== Reads ==============

    async def list_posts(
        self,
        tag: Optional[str] = None,
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[dict], int]:
        """
        List published posts, newest first.

        Args:
            tag: Only posts carrying this tag
            page: Page number (1-indexed)
            page_size: Posts per page

        Returns:
            Tuple of (posts on the page, total matching posts)
        """
        try:
            result = await self.session.execute(
                select(BlogPost).where(BlogPost.is_published == True)
            )
            posts = [post_to_dict(p) for p in result.scalars().all()]
        except DATABASE_UNAVAILABLE_ERRORS as e:
            await self._database_unavailable(e, "listing blog posts")
            posts = []

        posts.extend(await self.store.list_published())

        if tag:
            posts = [p for p in posts if tag in (p.get("tags") or [])]

        posts = _newest_first(posts)
        offset = (page - 1) * page_size
        return posts[offset:offset + page_size], len(posts)

    async def get_post(self, post_id: str) -> Optional[dict]:
        """
        Get a published post by id.

        Numeric ids are database posts; anything else is looked up in the
        file store.
        """
        if post_id.isascii() and post_id.isdigit():
            try:
                post = await self.get_post_model(int(post_id))
            except DATABASE_UNAVAILABLE_ERRORS as e:
                await self._database_unavailable(e, "loading a blog post")
                return None
            if post is None or not post.is_published:
                return None
            return post_to_dict(post)

        post = await self.store.get_post(post_id)
        if post is None or not post.get("is_published"):
            return None
        return post

    async def get_post_model(self, post_id: int) -> Optional[BlogPost]:
        """Get a database post by ID, published or not."""
        result = await self.session.execute(
            select(BlogPost).where(BlogPost.id == post_id)
        )
        return result.scalar_one_or_none()

    async def get_all_tags(self) -> List[str]:
        """Distinct tags across all published posts."""
        tags = set()
        try:
            result = await self.session.execute(
                select(BlogPost.tags).where(BlogPost.is_published == True)
            )
            for post_tags in result.scalars().all():
                tags.update(post_tags or [])
        except DATABASE_UNAVAILABLE_ERRORS as e:
            await self._database_unavailable(e, "listing blog tags")

        tags.update(await self.store.all_tags())
        return sorted(tags)

    # ============== Writes ==============

    async def create_post(
        self,
        author: User,
        title: str,
        content: str,
        excerpt: str,
        tags: List[str],
        image_url: Optional[str] = None
    ) -> BlogPost:
        """
        Create a post written by a signed-in member.

        Posts by moderators and admins are published immediately; other
        members' posts wait for an admin to publish them.
        """
        publish = author.is_moderator_role
        post = BlogPost(
            title=title,
            content=content,
            excerpt=excerpt,
            tags=list(tags),
            image_url=image_url,
            author_id=author.id,
            author=author,
            is_published=publish,
            published_at=utc_now() if publish else None,
        )
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        logger.info("Blog post %d created by user %d (published=%s)", post.id, author.id, publish)
        return post

    async def create_simple_post(
        self,
        author_name: str,
        title: str,
        content: str,
        excerpt: str,
        tags: List[str],
        image_url: Optional[str] = None
    ) -> dict:
        """
        Create a published post under a free-text author name.

        Falls back to the file store when the database is unreachable.
        """
        try:
            post = BlogPost(
                title=title,
                content=content,
                excerpt=excerpt,
                tags=list(tags),
                image_url=image_url,
                author_name=author_name,
                author=None,
                is_published=True,
                published_at=utc_now(),
            )
            self.session.add(post)
            await self.session.commit()
            await self.session.refresh(post)
        except DATABASE_UNAVAILABLE_ERRORS as e:
            await self._database_unavailable(e, "creating a blog post")
            return await self.store.add_post(
                title=title,
                content=content,
                excerpt=excerpt,
                tags=tags,
                author=author_name,
                image_url=image_url,
            )

        logger.info("Blog post %d created by %s", post.id, author_name)
        return post_to_dict(post)

    @staticmethod
    def can_edit(user: User, post: BlogPost) -> bool:
        """Authors may edit their own posts; admins may edit any post."""
        return user.is_admin or (post.author_id is not None and post.author_id == user.id)

    async def update_post(self, post: BlogPost, **kwargs) -> BlogPost:
        """Update the editable fields of a post."""
        for key, value in kwargs.items():
            if key in _EDITABLE_FIELDS:
                setattr(post, key, list(value) if key == "tags" else value)

        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def set_published(self, post: BlogPost, is_published: bool) -> BlogPost:
        """Publish or unpublish a post."""
        post.is_published = is_published
        post.published_at = utc_now() if is_published else None
        await self.session.commit()
        await self.session.refresh(post)
        logger.info("Blog post %d published=%s", post.id, is_published)
        return post

    async def delete_post(self, post: BlogPost) -> None:
        """Delete a post."""
        post_id = post.id
        await self.session.delete(post)
        await self.session.commit()
        logger.info("Deleted blog post %d", post_id)
