# src/phayao_hub/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .categories import router as categories_router
from .community import router as community_router
from .guides import router as guides_router
from .job_profiles import router as job_profiles_router
from .jobs import router as jobs_router
from .market import router as market_router
from .user import router as user_router

__all__ = [
    "admin_router",
    "auth_router",
    "categories_router",
    "market_router",
    "jobs_router",
    "community_router",
    "guides_router",
    "job_profiles_router",
    "user_router",
]
