# src/phayao_hub/models/user.py
"""SQLAlchemy models for registered accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from phayao_hub.db.session import Base
from phayao_hub.db.time import utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"

STATUS_ACTIVE = "active"
STATUS_SUSPENDED = "suspended"

ROLES = (ROLE_USER, ROLE_ADMIN)
USER_STATUSES = (STATUS_ACTIVE, STATUS_SUSPENDED)


class User(Base):
    """A registered member of the hub, identified by username and email."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_ACTIVE)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def is_admin(self) -> bool:
        """Return True if the account carries the admin role."""
        return self.role == ROLE_ADMIN

    @property
    def is_suspended(self) -> bool:
        """Return True if the account has been suspended by an admin."""
        return self.status == STATUS_SUSPENDED
