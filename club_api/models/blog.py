"""Blog post model."""
from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, ForeignKey, Text, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from club_api.database import Base


class BlogPost(Base):
    """Club article, written by a member or by a mentor through the access-code form."""

    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)

    # Either a member account or a free-text author name (mentor posts)
    author_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    author_name = Column(String(120), nullable=True)

    is_published = Column(Boolean, default=False, nullable=False, index=True)
    published_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", lazy="selectin")

    @property
    def display_author(self) -> str:
        if self.author is not None:
            return self.author.full_name
        return self.author_name or "Anonymous"

    def __repr__(self):
        return f"<BlogPost(id={self.id}, title={self.title}, published={self.is_published})>"
