# src/phayao_hub/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    categories_router,
    community_router,
    guides_router,
    job_profiles_router,
    jobs_router,
    market_router,
    user_router,
)

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
