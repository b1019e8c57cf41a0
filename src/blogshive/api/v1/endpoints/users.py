# src/blogshive/api/v1/endpoints/users.py
"""Profile and relationship endpoints for the BlogsHive API."""

from fastapi import APIRouter, Query

from blogshive.api.v1.dependencies import (
    CurrentUserDep,
    NotificationsDep,
    OptionalUserDep,
    SessionDep,
)
from blogshive.models import NotificationType
from blogshive.schemas.common import MessageResponse
from blogshive.schemas.discovery import PremiumUsersResponse, SuggestionsResponse, UserSearchResponse
from blogshive.schemas.relationship import (
    BlockedUsersResponse,
    BlockResponse,
    FollowersResponse,
    FollowingResponse,
    FollowResponse,
    FollowStatsResponse,
    PublicProfileResponse,
    RelationshipStatusResponse,
)
from blogshive.schemas.user import ProfileResponse, ProfileUpdateRequest, UserSummary
from blogshive.services import discovery, relationships, users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def read_me(current_user: CurrentUserDep) -> ProfileResponse:
    """Return the authenticated user's own profile."""
    return ProfileResponse.model_validate(current_user)


@router.patch("/me/profile", response_model=ProfileResponse)
async def update_my_profile(
    update: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Update name, avatar, bio, pronouns or topics of the current user."""
    user = users.update_profile(db, current_user, update)
    return ProfileResponse.model_validate(user)


@router.delete("/me", response_model=MessageResponse)
async def delete_me(current_user: CurrentUserDep, db: SessionDep) -> MessageResponse:
    """Delete the current account together with all of its relationships."""
    users.delete_account(db, current_user)
    return MessageResponse(message="Account deleted")


@router.get("/me/follow-stats", response_model=FollowStatsResponse)
async def my_follow_stats(current_user: CurrentUserDep, db: SessionDep) -> FollowStatsResponse:
    """Follower and following counts of the current user."""
    return FollowStatsResponse(stats=relationships.get_follow_stats(db, current_user.id))


@router.get("/me/blocked", response_model=BlockedUsersResponse)
async def my_blocked_users(current_user: CurrentUserDep, db: SessionDep) -> BlockedUsersResponse:
    """Users the current user has blocked."""
    blocked = relationships.list_blocked(db, current_user)
    return BlockedUsersResponse(blocked=[UserSummary.model_validate(user) for user in blocked])


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    db: SessionDep,
    q: str = Query("", description="Matches username or name, case-insensitively"),
    limit: int | None = Query(None, ge=0, description="Result count, capped at 50"),
) -> UserSearchResponse:
    """Find users by username or display name."""
    found = discovery.search_users(db, q, limit)
    return UserSearchResponse(users=[UserSummary.model_validate(user) for user in found])


@router.get("/premium", response_model=PremiumUsersResponse)
async def premium_users(
    db: SessionDep,
    limit: int | None = Query(None, ge=0, description="Result count, capped at 10"),
) -> PremiumUsersResponse:
    """A random handful of premium members with their top story."""
    return PremiumUsersResponse(premium_users=discovery.get_premium_users(db, limit))


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggested_users(
    db: SessionDep,
    viewer: OptionalUserDep,
    limit: int | None = Query(None, ge=0, description="Result count, capped at 20"),
) -> SuggestionsResponse:
    """Accounts worth following, ranked by shared topics and popularity."""
    return SuggestionsResponse(suggestions=discovery.get_suggested_users(db, viewer, limit))


@router.get("/{identifier}", response_model=PublicProfileResponse)
async def read_user(identifier: str, db: SessionDep, viewer: OptionalUserDep) -> PublicProfileResponse:
    """Public profile of a user looked up by id or username."""
    user = users.require_user(db, identifier)
    flags = None
    if viewer is not None:
        flags = relationships.get_relationship_status(db, viewer, user)
    return PublicProfileResponse(
        user=UserSummary.model_validate(user),
        stats=relationships.get_follow_stats(db, user.id),
        relationship=flags,
    )


@router.post("/{identifier}/follow", response_model=FollowResponse)
async def follow_user(
    identifier: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
) -> FollowResponse:
    """Follow a user and notify them the first time."""
    target = users.require_user(db, identifier)
    result = relationships.follow(db, current_user, target)

    if result.created:
        notifications.safe_create_notification(
            db,
            target.id,
            NotificationType.FOLLOW,
            sender_id=current_user.id,
            message=f"{current_user.display_name} started following you",
            metadata={
                "follower_id": str(current_user.id),
                "follower_username": current_user.username,
            },
        )

    return FollowResponse(
        message="Followed user" if result.created else "Already following user",
        user=UserSummary.model_validate(target),
        stats=result.stats,
        is_following=True,
    )


@router.delete("/{identifier}/follow", response_model=FollowResponse)
async def unfollow_user(identifier: str, current_user: CurrentUserDep, db: SessionDep) -> FollowResponse:
    """Stop following a user."""
    target = users.require_user(db, identifier)
    result = relationships.unfollow(db, current_user, target)
    return FollowResponse(
        message="Unfollowed user" if result.removed else "Not following user",
        user=UserSummary.model_validate(target),
        stats=result.stats,
        is_following=False,
    )


@router.post("/{identifier}/block", response_model=BlockResponse)
async def block_user(identifier: str, current_user: CurrentUserDep, db: SessionDep) -> BlockResponse:
    """Block a user; follow edges in both directions are removed."""
    target = users.require_user(db, identifier)
    edge = relationships.block(db, current_user, target)
    return BlockResponse(
        message="User blocked",
        user=UserSummary.model_validate(target),
        status=edge.status,
    )


@router.delete("/{identifier}/block", response_model=BlockResponse)
async def unblock_user(identifier: str, current_user: CurrentUserDep, db: SessionDep) -> BlockResponse:
    """Lift a block."""
    target = users.require_user(db, identifier)
    removed = relationships.unblock(db, current_user, target)
    return BlockResponse(
        message="User unblocked" if removed else "User was not blocked",
        user=UserSummary.model_validate(target),
        status=None,
    )


@router.get("/{identifier}/relationship", response_model=RelationshipStatusResponse)
async def relationship_status(
    identifier: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RelationshipStatusResponse:
    """How the current user and the target relate, in both directions."""
    target = users.require_user(db, identifier)
    return RelationshipStatusResponse(
        user=UserSummary.model_validate(target),
        status=relationships.get_relationship_status(db, current_user, target),
    )


@router.get("/{identifier}/followers", response_model=FollowersResponse)
async def list_followers(
    identifier: str,
    db: SessionDep,
    viewer: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int | None = Query(None, ge=0, description="Page size, capped at 50"),
) -> FollowersResponse:
    """Paginated list of users following the target."""
    target = users.require_user(db, identifier)
    result = relationships.list_followers(db, target, page=page, limit=limit, viewer=viewer)
    return FollowersResponse(
        user=UserSummary.model_validate(target),
        pagination=result.pagination,
        followers=result.users,
    )


@router.get("/{identifier}/following", response_model=FollowingResponse)
async def list_following(
    identifier: str,
    db: SessionDep,
    viewer: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int | None = Query(None, ge=0, description="Page size, capped at 50"),
) -> FollowingResponse:
    """Paginated list of users the target follows."""
    target = users.require_user(db, identifier)
    result = relationships.list_following(db, target, page=page, limit=limit, viewer=viewer)
    return FollowingResponse(
        user=UserSummary.model_validate(target),
        pagination=result.pagination,
        following=result.users,
    )


@router.get("/{identifier}/follow-stats", response_model=FollowStatsResponse)
async def user_follow_stats(identifier: str, db: SessionDep) -> FollowStatsResponse:
    """Follower and following counts of any user."""
    target = users.require_user(db, identifier)
    return FollowStatsResponse(
        user=UserSummary.model_validate(target),
        stats=relationships.get_follow_stats(db, target.id),
    )
