"""File-based blog post store.

Keeps blog posts in a single JSON document (``<BLOG_DATA_DIR>/blog-posts.json``)
so the blog keeps working while the database is unreachable. Posts written
here get uuid string ids, which never collide with integer database ids.
"""
import asyncio
import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional

from club_api.utils.dates import parse_timestamp, utc_now


logger = logging.getLogger(__name__)

BLOG_DATA_FILENAME = "blog-posts.json"

_TIMESTAMP_FIELDS = ("published_at", "created_at", "updated_at")


def _decode(record: dict) -> dict:
    post = dict(record)
    for field in _TIMESTAMP_FIELDS:
        post[field] = parse_timestamp(post.get(field))
    post.setdefault("tags", [])
    post.setdefault("author_id", None)
    return post


def _encode(post: dict) -> dict:
    record = dict(post)
    for field in _TIMESTAMP_FIELDS:
        value = record.get(field)
        if value is not None and not isinstance(value, str):
            record[field] = value.isoformat()
    return record


class BlogFileStore:
    """JSON document of blog posts, rewritten atomically on every change."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / BLOG_DATA_FILENAME
        self._lock = asyncio.Lock()

    async def ensure_ready(self) -> None:
        """Create the data directory if it does not exist."""
        await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)

    # ============== Raw document access ==============

    def _read(self) -> List[dict]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return []
        data = json.loads(content)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not contain a list of posts")
        return data

    def _write(self, records: List[dict]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".blog-posts-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def load(self) -> List[dict]:
        """Load every post in the document, timestamps parsed."""
        async with self._lock:
            records = await asyncio.to_thread(self._read)
        return [_decode(record) for record in records]

    async def save(self, posts: List[dict]) -> None:
        """Replace the whole document."""
        records = [_encode(post) for post in posts]
        async with self._lock:
            await asyncio.to_thread(self._write, records)

    # ============== Posts ==============

    async def add_post(
        self,
        title: str,
        content: str,
        excerpt: str,
        tags: List[str],
        author: str,
        image_url: Optional[str] = None,
        is_published: bool = True
    ) -> dict:
        """
        Append a post to the document.

        Returns:
            The stored post with its generated id
        """
        now = utc_now()
        post = {
            "id": uuid.uuid4().hex,
            "title": title,
            "content": content,
            "excerpt": excerpt,
            "tags": list(tags),
            "image_url": image_url,
            "author": author,
            "author_id": None,
            "is_published": is_published,
            "published_at": now if is_published else None,
            "created_at": now,
            "updated_at": now,
        }

        # Read-modify-write under one lock acquisition
        async with self._lock:
            records = await asyncio.to_thread(self._read)
            records.append(_encode(post))
            await asyncio.to_thread(self._write, records)

        logger.info("Stored blog post %s in %s", post["id"], self.path)
        return post

    async def get_post(self, post_id: str) -> Optional[dict]:
        """Get a post by its string id."""
        for post in await self.load():
            if str(post.get("id")) == post_id:
                return post
        return None

    async def list_published(self) -> List[dict]:
        """All published posts in the document, in file order."""
        return [post for post in await self.load() if post.get("is_published")]

    async def all_tags(self) -> List[str]:
        """Distinct tags used by published posts."""
        tags = set()
        for post in await self.list_published():
            tags.update(post.get("tags") or [])
        return sorted(tags)
