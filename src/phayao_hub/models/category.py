# src/phayao_hub/models/category.py
"""SQLAlchemy model for listing categories."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from phayao_hub.db.session import Base


class Category(Base):
    """Category shared by market items and jobs, distinguished by `type`."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # "market" or "job"
    type: Mapped[str] = mapped_column(String(20), nullable=False)
