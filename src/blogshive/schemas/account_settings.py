"""Account settings and newsletter schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from blogshive.models.account_settings import CommentSetting, DefaultVisibility, DigestFrequency


class SettingsResponse(BaseModel):
    """The current user's settings plus the derived premium flag."""

    id: int
    email: str | None = None
    username: str
    display_name: str | None = None
    visibility: DefaultVisibility
    send_emails: bool
    comment_setting: CommentSetting
    signature: str
    auto_save: bool
    analytics_id: str
    digest_frequency: DigestFrequency
    membership: str
    is_premium: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SettingsUpdate(BaseModel):
    """Partial settings update; unknown keys are ignored."""

    email: str | None = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str | None = Field(None, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    display_name: str | None = Field(None, min_length=1, max_length=120)
    visibility: DefaultVisibility | None = None
    send_emails: bool | None = None
    comment_setting: CommentSetting | None = None
    signature: str | None = Field(None, max_length=500)
    auto_save: bool | None = None
    analytics_id: str | None = Field(None, max_length=64)
    digest_frequency: DigestFrequency | None = None
    membership: str | None = Field(None, max_length=32)

    model_config = ConfigDict(extra="ignore")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else v

    @field_validator("username")
    @classmethod
    def lowercase_username(cls, v: str | None) -> str | None:
        """Usernames are stored lowercase."""
        return v.strip().lower() if v is not None else v


class NewsletterResponse(BaseModel):
    """Newsletter preference of the current user."""

    id: int
    is_subscribed: bool
    subscribers_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NewsletterUpdate(BaseModel):
    """Subscribe or unsubscribe; the flag must be a real boolean."""

    subscribe: StrictBool
