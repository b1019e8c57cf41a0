"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Schema for posting a response or a reply."""

    post_id: int
    content: str = Field(..., min_length=1, max_length=10_000)
    parent_comment_id: int | None = None


class CommentUpdate(BaseModel):
    """Schema for editing a response."""

    content: str = Field(..., min_length=1, max_length=10_000)


class CommentAuthor(BaseModel):
    """Author card shown with a response."""

    id: int
    username: str
    name: str | None = None
    avatar: str | None = None


class CommentResponse(BaseModel):
    """A single response."""

    id: int
    post_id: int
    parent_comment_id: int | None = None
    content: str
    likes_count: int = 0
    is_visible: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: CommentAuthor | None = None


class CommentNode(CommentResponse):
    """A response with its nested replies."""

    replies: list[CommentNode] = Field(default_factory=list)


class CommentThreadResponse(BaseModel):
    """Top-level responses of a post with nested replies, oldest first."""

    items: list[CommentNode]
