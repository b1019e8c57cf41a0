# src/blogshive/api/v1/endpoints/posts.py
"""Post-related endpoints for the BlogsHive API."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from blogshive.api.v1.dependencies import (
    CurrentUserDep,
    NotificationsDep,
    OptionalUserDep,
    SessionDep,
)
from blogshive.schemas.common import MessageResponse
from blogshive.schemas.post import (
    AuthorPostsResponse,
    ClapResponse,
    DraftListResponse,
    PostCreate,
    PostListResponse,
    PostPagination,
    PostResponse,
    PostUpdate,
    ReportCreate,
    ReportResponse,
)
from blogshive.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostListResponse)
async def list_posts(
    db: SessionDep,
    viewer: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int | None = Query(None, ge=0, description="Page size, capped at 50"),
    post_status: Literal["published", "draft"] = Query("published", alias="status"),
    author: str | None = Query(None, description="Only posts by this username"),
    sort: Literal["recent", "popular"] = Query("recent"),
    scope: str | None = Query(None, description="for_you (default) or featured"),
) -> PostListResponse:
    """Return a page of the post feed.

    Hidden posts are excluded for signed-in viewers. Anonymous viewers cannot
    list drafts or the featured scope.
    """
    wants_featured = (scope or "").strip().lower() == "featured" and not author
    if viewer is None and (post_status == "draft" or wants_featured):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    feed = post_service.list_feed(
        db,
        viewer,
        page=page,
        limit=limit,
        status=post_status,
        author=author,
        sort=sort,
        scope=scope,
    )
    return PostListResponse(
        items=feed.items,
        pagination=PostPagination(total=feed.total, page=feed.page, limit=feed.limit),
    )


@router.get("/drafts", response_model=DraftListResponse)
async def list_drafts(current_user: CurrentUserDep, db: SessionDep) -> DraftListResponse:
    """The current user's drafts, most recently edited first."""
    return DraftListResponse(items=post_service.list_drafts(db, current_user))


@router.get("/author/{username}", response_model=AuthorPostsResponse)
async def list_author_posts(username: str, db: SessionDep, viewer: OptionalUserDep) -> AuthorPostsResponse:
    """Published posts of an author as seen by the viewer."""
    author, items = post_service.list_author_posts(db, username, viewer)
    return AuthorPostsResponse(author=author, posts=items)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(post: PostCreate, current_user: CurrentUserDep, db: SessionDep) -> PostResponse:
    """Create a draft, or publish directly with ``is_published``."""
    created = post_service.create_post(db, current_user, post)
    return post_service.serialize_post(created, current_user)


@router.get("/{id_or_slug}", response_model=PostResponse)
async def get_post(id_or_slug: str, db: SessionDep, viewer: OptionalUserDep) -> PostResponse:
    """Get a post by id or slug."""
    post = post_service.get_visible_post(db, id_or_slug, viewer)
    return post_service.serialize_posts(db, [post])[0]


@router.patch("/{id_or_slug}", response_model=PostResponse)
async def update_post(
    id_or_slug: str,
    update: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Edit one of the current user's posts."""
    post = post_service.get_post_or_404(db, id_or_slug)
    updated = post_service.update_post(db, post, current_user, update)
    return post_service.serialize_post(updated, current_user)


@router.delete("/{id_or_slug}", response_model=MessageResponse)
async def delete_post(
    id_or_slug: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
) -> MessageResponse:
    """Delete one of the current user's posts."""
    post = post_service.get_post_or_404(db, id_or_slug)
    post_service.delete_post(db, post, current_user, notifications)
    return MessageResponse(message="Post deleted")


@router.post("/{id_or_slug}/clap", response_model=ClapResponse)
async def clap_post(
    id_or_slug: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
) -> ClapResponse:
    """Clap for a post; the author is notified."""
    post = post_service.get_visible_post(db, id_or_slug, current_user)
    return ClapResponse(clap_count=post_service.clap_post(db, post, current_user, notifications))


@router.post(
    "/{id_or_slug}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_post(
    id_or_slug: str,
    report: ReportCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReportResponse:
    """Report a post to moderators; reporting again replaces the earlier reason."""
    post_service.report_post(db, id_or_slug, current_user, report.reason, report.details)
    return ReportResponse(reported=True)
