# src/blogshive/main.py
"""Main entry point for the BlogsHive application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from blogshive.api.v1 import (
    account_settings_router,
    comments_router,
    hidden_router,
    newsletter_router,
    notifications_router,
    posts_router,
    realtime_router,
    saved_router,
    users_router,
)
from blogshive.core.errors import register_exception_handlers
from blogshive.core.logging import configure_logging
from blogshive.core.settings import settings
from blogshive.services import ConnectionManager, NotificationService

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Blogging and publishing API with real-time notifications",
    version=settings.app_version,
)

# Process-local socket registry shared with the notification service
app.state.connections = ConnectionManager()
app.state.notification_service = NotificationService(app.state.connections)

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

register_exception_handlers(app)

# Include API routers
app.include_router(users_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(saved_router, prefix="/api/v1")
app.include_router(hidden_router, prefix="/api/v1")
app.include_router(account_settings_router, prefix="/api/v1")
app.include_router(newsletter_router, prefix="/api/v1")
app.include_router(realtime_router)


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    connections: ConnectionManager = app.state.connections
    await connections.drain()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": "Blogging and publishing API with real-time notifications",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("blogshive.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
