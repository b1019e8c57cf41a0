"""Saved and hidden post schemas."""

from datetime import datetime

from pydantic import BaseModel

from .post import PostResponse


class SavedPostItem(BaseModel):
    """A bookmarked post."""

    id: int
    saved_at: datetime
    post: PostResponse


class SavedPostList(BaseModel):
    """All bookmarks of the viewer, newest first."""

    items: list[SavedPostItem]


class SaveResult(BaseModel):
    """Result of bookmarking a post."""

    saved: bool
    saved_at: datetime
    post: PostResponse


class RemoveSavedResult(BaseModel):
    """Result of removing a bookmark."""

    removed: bool
    post_id: int


class HiddenResult(BaseModel):
    """Result of hiding or unhiding a post."""

    hidden: bool
    post_id: int
