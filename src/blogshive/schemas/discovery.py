"""Schemas for finding people to follow."""

from datetime import datetime

from pydantic import BaseModel, Field

from .relationship import FollowStats
from .user import UserSummary


class UserSearchResponse(BaseModel):
    """Users whose username or name matches the query."""

    users: list[UserSummary]


class SuggestedUser(BaseModel):
    """A suggested account with the topics it shares with the viewer."""

    user: UserSummary
    stats: FollowStats
    is_following: bool = False
    shared_topics: list[str] = Field(default_factory=list)


class SuggestionsResponse(BaseModel):
    suggestions: list[SuggestedUser]


class PostHighlight(BaseModel):
    """An author's best-performing published story."""

    title: str
    subtitle: str | None = None
    slug: str
    clap_count: int = 0
    response_count: int = 0
    published_at: datetime | None = None


class PremiumUser(BaseModel):
    user: UserSummary
    stats: FollowStats
    highlight: PostHighlight | None = None


class PremiumUsersResponse(BaseModel):
    premium_users: list[PremiumUser]
