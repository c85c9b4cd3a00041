# src/phayao_hub/models/__init__.py
"""SQLAlchemy models for the Phayao Hub application."""

from .category import Category
from .community import Comment, CommunityPost
from .favorite import Favorite
from .guide import Guide, GuideImage
from .job import Job
from .job_profile import JobProfile
from .market import MarketImage, MarketItem
from .user import User

__all__ = [
    "Category",
    "Comment", "CommunityPost",
    "Favorite",
    "Guide", "GuideImage",
    "Job",
    "JobProfile",
    "MarketImage", "MarketItem",
    "User",
]
