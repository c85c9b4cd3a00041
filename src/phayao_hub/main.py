# src/phayao_hub/main.py
"""Main entry point for the Phayao Hub application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from phayao_hub.api.v1 import (
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
from phayao_hub.core.logging import configure_logging
from phayao_hub.core.settings import settings
from phayao_hub.db.session import create_tables

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Community portal API for Phayao: market, jobs, community board and guides",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


@app.middleware("http")
async def add_security_headers(request: Request, call_next) -> Response:
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    if settings.is_production:
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
        )
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and return a generic 500 body."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    detail = "Internal Server Error" if settings.is_production else str(exc)
    return JSONResponse(status_code=500, content={"detail": detail})


# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(market_router, prefix="/api")
app.include_router(jobs_router, prefix="/api")
app.include_router(community_router, prefix="/api")
app.include_router(guides_router, prefix="/api")
app.include_router(job_profiles_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("phayao_hub.main:app", host="0.0.0.0", port=8000, reload=not settings.is_production)
