# src/phayao_hub/models/community.py
"""SQLAlchemy models for the community discussion board."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from phayao_hub.db.session import Base
from phayao_hub.db.time import utcnow
from phayao_hub.models.user import User

POST_STATUS_ACTIVE = "active"
POST_STATUSES = (POST_STATUS_ACTIVE, "hidden", "closed")


class CommunityPost(Base):
    """A discussion thread started by a member."""

    __tablename__ = "community_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=POST_STATUS_ACTIVE)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship("User")

    @property
    def full_name(self) -> str | None:
        return self.author.full_name if self.author else None

    @property
    def avatar_url(self) -> str | None:
        return self.author.avatar_url if self.author else None


class Comment(Base):
    """A reply left on a community post."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("community_posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship("User")

    @property
    def full_name(self) -> str | None:
        return self.author.full_name if self.author else None

    @property
    def avatar_url(self) -> str | None:
        return self.author.avatar_url if self.author else None
