# src/blogshive/api/v1/endpoints/saved.py
"""Bookmark endpoints."""

from fastapi import APIRouter, Response, status

from blogshive.api.v1.dependencies import CurrentUserDep, SessionDep
from blogshive.schemas.bookmark import RemoveSavedResult, SavedPostList, SaveResult
from blogshive.services import bookmarks
from blogshive.services.posts import serialize_posts

router = APIRouter(prefix="/saved", tags=["saved"])


@router.get("/", response_model=SavedPostList)
async def list_saved_posts(current_user: CurrentUserDep, db: SessionDep) -> SavedPostList:
    """The current user's bookmarks, most recent first."""
    return SavedPostList(items=bookmarks.list_saved(db, current_user.id))


@router.post("/{post_id}", response_model=SaveResult, status_code=status.HTTP_201_CREATED)
async def save_post(
    post_id: int,
    response: Response,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SaveResult:
    """Bookmark a post; 201 the first time, 200 when it was already saved."""
    saved, post, created = bookmarks.save_post(db, current_user.id, post_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return SaveResult(saved=True, saved_at=saved.saved_at, post=serialize_posts(db, [post])[0])


@router.delete("/{post_id}", response_model=RemoveSavedResult)
async def remove_saved_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> RemoveSavedResult:
    """Remove a bookmark."""
    bookmarks.remove_saved(db, current_user.id, post_id)
    return RemoveSavedResult(removed=True, post_id=post_id)
