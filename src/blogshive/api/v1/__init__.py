# src/blogshive/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
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

__all__ = [
    "account_settings_router",
    "comments_router",
    "hidden_router",
    "newsletter_router",
    "notifications_router",
    "posts_router",
    "realtime_router",
    "saved_router",
    "users_router",
]
