"""Follow/block related Pydantic schemas."""

from pydantic import BaseModel

from .common import PageInfo
from .user import UserSummary, UserWithViewerFlags


class FollowStats(BaseModel):
    """Follower and following counts for one user."""

    followers: int = 0
    following: int = 0


class FollowResponse(BaseModel):
    """Result of a follow or unfollow request."""

    message: str
    user: UserSummary
    stats: FollowStats
    is_following: bool


class BlockResponse(BaseModel):
    """Result of a block or unblock request."""

    message: str
    user: UserSummary
    status: str | None


class RelationshipFlags(BaseModel):
    """How the viewer and another user relate, in both directions."""

    is_self: bool = False
    is_following: bool = False
    is_blocked: bool = False
    is_followed_by: bool = False
    has_blocked_you: bool = False


class RelationshipStatusResponse(BaseModel):
    """Pairwise relationship state between the viewer and a user."""

    user: UserSummary
    status: RelationshipFlags


class FollowersResponse(BaseModel):
    """A page of users following ``user``."""

    user: UserSummary
    pagination: PageInfo
    followers: list[UserWithViewerFlags]


class FollowingResponse(BaseModel):
    """A page of users that ``user`` follows."""

    user: UserSummary
    pagination: PageInfo
    following: list[UserWithViewerFlags]


class FollowStatsResponse(BaseModel):
    """Follow counts, with the user they belong to when looked up by identifier."""

    user: UserSummary | None = None
    stats: FollowStats


class BlockedUsersResponse(BaseModel):
    """Users the viewer has blocked, newest first."""

    blocked: list[UserSummary]


class PublicProfileResponse(BaseModel):
    """Profile page payload for any user."""

    user: UserSummary
    stats: FollowStats
    relationship: RelationshipFlags | None = None
