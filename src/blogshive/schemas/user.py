"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRONOUN_MAX_LENGTH = 4


class UserSummary(BaseModel):
    """Public fields of a user embedded in other payloads."""

    id: int
    username: str
    name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    pronouns: list[str] = Field(default_factory=list)
    membership_status: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserWithViewerFlags(UserSummary):
    """User entry in follower/following listings, annotated for the viewer."""

    is_followed_by_viewer: bool | None = None
    follows_viewer: bool | None = None


class ProfileResponse(UserSummary):
    """The authenticated user's own profile."""

    email: str | None = None
    topics: list[str] = Field(default_factory=list)
    auth_provider: str = "local"


class ProfileUpdateRequest(BaseModel):
    """Schema for updating profile information; omitted fields stay unchanged."""

    name: str | None = Field(None, min_length=1, max_length=120)
    avatar: str | None = Field(None, max_length=2048)
    bio: str | None = Field(None, max_length=160)
    pronouns: list[str] | None = Field(None, max_length=4)
    topics: list[str] | None = Field(None, max_length=50)

    @field_validator("pronouns")
    @classmethod
    def validate_pronouns(cls, v: list[str] | None) -> list[str] | None:
        """Strip each pronoun and enforce the short-token length limit."""
        if v is None:
            return v
        cleaned = [item.strip() for item in v if item.strip()]
        for item in cleaned:
            if len(item) > PRONOUN_MAX_LENGTH:
                raise ValueError(f"Pronouns must be at most {PRONOUN_MAX_LENGTH} characters each")
        return cleaned

    @field_validator("topics")
    @classmethod
    def normalize_topics(cls, v: list[str] | None) -> list[str] | None:
        """Lowercase, trim and de-duplicate topics while keeping their order."""
        if v is None:
            return v
        seen: dict[str, None] = {}
        for topic in v:
            token = topic.strip().lower()
            if token:
                seen.setdefault(token, None)
        return list(seen)
