# src/blogshive/api/v1/endpoints/comments.py
"""Comment (response) endpoints."""

from fastapi import APIRouter, Query, status

from blogshive.api.v1.dependencies import CurrentUserDep, NotificationsDep, SessionDep
from blogshive.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
)
from blogshive.schemas.common import MessageResponse
from blogshive.services import comments as comment_service

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/", response_model=CommentThreadResponse)
async def list_comments(
    db: SessionDep,
    post_id: int = Query(..., description="Post whose responses to load"),
) -> CommentThreadResponse:
    """Visible responses of a post as a reply tree, oldest first."""
    return CommentThreadResponse(items=comment_service.list_comments(db, post_id))


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
) -> CommentResponse:
    """Respond to a post, or reply to another response."""
    return comment_service.create_comment(
        db,
        current_user,
        comment.post_id,
        comment.content,
        notifications,
        parent_comment_id=comment.parent_comment_id,
    )


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    update: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    """Edit one of the current user's responses."""
    return comment_service.update_comment(db, comment_id, current_user, update.content)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: int, current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Delete one of the current user's responses."""
    comment_service.delete_comment(db, comment_id, current_user)
    return MessageResponse(message="Comment deleted")
