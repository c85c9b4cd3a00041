# src/phayao_hub/models/market.py
"""SQLAlchemy models for secondhand marketplace listings."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from phayao_hub.db.session import Base
from phayao_hub.db.time import utcnow
from phayao_hub.models.category import Category
from phayao_hub.models.user import User

MARKET_STATUS_AVAILABLE = "available"
MARKET_STATUS_SOLD = "sold"
MARKET_STATUSES = (MARKET_STATUS_AVAILABLE, "reserved", MARKET_STATUS_SOLD, "closed")


class MarketItem(Base):
    """An item offered for sale by a member."""

    __tablename__ = "market_items"
    __table_args__ = (Index("ix_market_items_status_created", "status", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    # new, like_new, good, fair
    condition_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact_line: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MARKET_STATUS_AVAILABLE
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    seller: Mapped[User] = relationship("User")
    category: Mapped[Category | None] = relationship("Category")
    images: Mapped[list[MarketImage]] = relationship(
        "MarketImage",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by=lambda: (MarketImage.is_primary.desc(), MarketImage.display_order),
    )

    @property
    def seller_full_name(self) -> str | None:
        return self.seller.full_name if self.seller else None

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def category_slug(self) -> str | None:
        return self.category.slug if self.category else None

    @property
    def primary_image(self) -> str | None:
        """Return the URL of the primary image, if one is flagged."""
        for image in self.images:
            if image.is_primary:
                return image.image_url
        return None


class MarketImage(Base):
    """Image attached to a market item."""

    __tablename__ = "market_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("market_items.id", ondelete="CASCADE"), nullable=False
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    item: Mapped[MarketItem] = relationship("MarketItem", back_populates="images")
