# src/blogshive/api/v1/endpoints/hidden.py
"""Endpoints for hiding posts from the feed."""

from fastapi import APIRouter, Response, status

from blogshive.api.v1.dependencies import CurrentUserDep, SessionDep
from blogshive.schemas.bookmark import HiddenResult
from blogshive.services import bookmarks

router = APIRouter(prefix="/hidden", tags=["hidden"])


@router.post("/{post_id}", response_model=HiddenResult, status_code=status.HTTP_201_CREATED)
async def hide_post(
    post_id: int,
    response: Response,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> HiddenResult:
    """Hide a published post; 200 when it was already hidden."""
    if not bookmarks.hide_post(db, current_user.id, post_id):
        response.status_code = status.HTTP_200_OK
    return HiddenResult(hidden=True, post_id=post_id)


@router.delete("/{post_id}", response_model=HiddenResult)
async def unhide_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> HiddenResult:
    """Show a hidden post again."""
    bookmarks.unhide_post(db, current_user.id, post_id)
    return HiddenResult(hidden=False, post_id=post_id)
