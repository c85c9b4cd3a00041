# src/phayao_hub/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminUserResponse, DashboardStats
from .category import CategoryResponse
from .common import MessageResponse, Page, StatusUpdate, ViewRecorded
from .community import CommentCreate, CommentResponse, CommunityPostCreate, CommunityPostResponse
from .guide import GuideDetail, GuideResponse
from .job import JobCreate, JobDetail, JobSummary
from .job_profile import JobProfileCreate, JobProfileResponse
from .market import MarketItemCreate, MarketItemDetail, MarketItemSummary, MarketItemUpdate
from .user import AuthResponse, LoginRequest, RegisterRequest, UserResponse

__all__ = [
    "AdminUserResponse", "DashboardStats",
    "CategoryResponse",
    "MessageResponse", "Page", "StatusUpdate", "ViewRecorded",
    "CommentCreate", "CommentResponse", "CommunityPostCreate", "CommunityPostResponse",
    "GuideDetail", "GuideResponse",
    "JobCreate", "JobDetail", "JobSummary",
    "JobProfileCreate", "JobProfileResponse",
    "MarketItemCreate", "MarketItemDetail", "MarketItemSummary", "MarketItemUpdate",
    "AuthResponse", "LoginRequest", "RegisterRequest", "UserResponse",
]
