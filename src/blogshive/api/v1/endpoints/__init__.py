# src/blogshive/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .account_settings import router as account_settings_router
from .comments import router as comments_router
from .hidden import router as hidden_router
from .newsletter import router as newsletter_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .realtime import router as realtime_router
from .saved import router as saved_router
from .users import router as users_router

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
