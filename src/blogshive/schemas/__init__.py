# src/blogshive/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .account_settings import NewsletterResponse, NewsletterUpdate, SettingsResponse, SettingsUpdate
from .bookmark import HiddenResult, RemoveSavedResult, SavedPostItem, SavedPostList, SaveResult
from .comment import (
    CommentCreate,
    CommentNode,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
)
from .common import MessageResponse, PageInfo
from .discovery import (
    PostHighlight,
    PremiumUser,
    PremiumUsersResponse,
    SuggestedUser,
    SuggestionsResponse,
    UserSearchResponse,
)
from .notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationItemResponse,
    NotificationPage,
    NotificationPayload,
)
from .post import (
    ContentBlock,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
    ReportCreate,
    ReportResponse,
)
from .relationship import (
    BlockResponse,
    FollowResponse,
    FollowStats,
    RelationshipFlags,
    RelationshipStatusResponse,
)
from .user import ProfileResponse, ProfileUpdateRequest, UserSummary, UserWithViewerFlags

__all__ = [
    "NewsletterResponse", "NewsletterUpdate", "SettingsResponse", "SettingsUpdate",
    "HiddenResult", "RemoveSavedResult", "SavedPostItem", "SavedPostList", "SaveResult",
    "CommentCreate", "CommentNode", "CommentResponse", "CommentThreadResponse", "CommentUpdate",
    "MessageResponse", "PageInfo",
    "PostHighlight", "PremiumUser", "PremiumUsersResponse", "SuggestedUser",
    "SuggestionsResponse", "UserSearchResponse",
    "MarkReadRequest", "MarkReadResponse", "NotificationItemResponse",
    "NotificationPage", "NotificationPayload",
    "ContentBlock", "PostCreate", "PostListResponse", "PostResponse", "PostUpdate",
    "ReportCreate", "ReportResponse",
    "BlockResponse", "FollowResponse", "FollowStats", "RelationshipFlags",
    "RelationshipStatusResponse",
    "ProfileResponse", "ProfileUpdateRequest", "UserSummary", "UserWithViewerFlags",
]
