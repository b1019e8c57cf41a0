# src/blogshive/services/__init__.py
"""Business logic services for the BlogsHive application."""

from .connections import ConnectionManager
from .notifications import NotificationService

__all__ = [
    "ConnectionManager",
    "NotificationService",
]
