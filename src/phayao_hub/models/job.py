# src/phayao_hub/models/job.py
"""SQLAlchemy model for job board postings."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from phayao_hub.db.session import Base
from phayao_hub.db.time import utcnow
from phayao_hub.models.category import Category
from phayao_hub.models.user import User

JOB_STATUS_OPEN = "open"
JOB_STATUSES = (JOB_STATUS_OPEN, "closed")


class Job(Base):
    """A vacancy posted by an employer."""

    __tablename__ = "jobs"
    __table_args__ = (Index("ix_jobs_status_created", "status", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # full_time, part_time, contract, freelance
    job_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    salary_min: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    salary_max: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    # monthly, daily, hourly
    salary_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact_line: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    benefits: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=JOB_STATUS_OPEN)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    poster: Mapped[User] = relationship("User")
    category: Mapped[Category | None] = relationship("Category")

    @property
    def poster_full_name(self) -> str | None:
        return self.poster.full_name if self.poster else None

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def category_slug(self) -> str | None:
        return self.category.slug if self.category else None
