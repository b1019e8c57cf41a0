# src/blogshive/models/__init__.py
"""SQLAlchemy models for the BlogsHive application."""

from .account_settings import (
    CommentSetting,
    DefaultVisibility,
    DigestFrequency,
    Newsletter,
    UserSettings,
)
from .bookmark import HiddenPost, SavedPost
from .comment import Comment
from .notification import Notification, NotificationType
from .post import Post, PostVisibility
from .relationship import Relationship, RelationshipStatus, SelfRelationshipError
from .report import PostReport
from .user import User

__all__ = [
    "CommentSetting", "DefaultVisibility", "DigestFrequency", "Newsletter", "UserSettings",
    "Comment",
    "HiddenPost", "SavedPost",
    "Notification", "NotificationType",
    "Post", "PostVisibility",
    "PostReport",
    "Relationship", "RelationshipStatus", "SelfRelationshipError",
    "User",
]
