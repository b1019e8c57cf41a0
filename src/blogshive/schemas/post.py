"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blogshive.models.post import PostVisibility

BlockType = Literal["P", "H1", "H2", "H3", "BQ", "IMG", "VIDEO", "CODE", "UL", "OL", "DIVIDER"]


class Markup(BaseModel):
    """Inline formatting span over a block's text, e.g. A (link), STRONG, EM."""

    type: str = Field(..., min_length=1, max_length=16)
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    href: str | None = None

    @model_validator(mode="after")
    def _check_range(self) -> "Markup":
        if self.end < self.start:
            raise ValueError("Markup end must not precede its start")
        return self


class ImageAttributes(BaseModel):
    """Image embedded in an IMG block."""

    url: str
    alt: str | None = None
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)


class VideoAttributes(BaseModel):
    """Video embedded in a VIDEO block."""

    url: str
    caption: str | None = None
    platform: Literal["YOUTUBE", "VIMEO", "UPLOAD"] = "UPLOAD"


class ContentBlock(BaseModel):
    """One block of a post body."""

    type: BlockType
    text: str | None = None
    image: ImageAttributes | None = None
    video: VideoAttributes | None = None
    list_items: list[str] | None = None
    code_language: str | None = None
    markups: list[Markup] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("code_language")
    @classmethod
    def _lower_language(cls, v: str | None) -> str | None:
        if v is None:
            return v
        token = v.strip().lower()
        return token or None


class PostCreate(BaseModel):
    """Schema for creating a draft or publishing directly."""

    title: str = Field(..., min_length=1, max_length=300)
    subtitle: str | None = Field(None, max_length=500)
    content: list[ContentBlock] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list, max_length=10)
    cover_image: str | None = None
    is_published: bool = False
    visibility: PostVisibility = PostVisibility.PUBLIC
    allow_responses: bool = True


class PostUpdate(BaseModel):
    """Partial update; only provided fields are applied."""

    title: str | None = Field(None, min_length=1, max_length=300)
    subtitle: str | None = Field(None, max_length=500)
    content: list[ContentBlock] | None = None
    tags: list[str] | None = Field(None, max_length=10)
    cover_image: str | None = None
    is_published: bool | None = None
    visibility: PostVisibility | None = None
    allow_responses: bool | None = None


class PostAuthor(BaseModel):
    """Author card shown with a post."""

    id: int
    username: str
    name: str | None = None
    avatar: str | None = None
    bio: str | None = None
    is_premium: bool = False


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    subtitle: str | None = None
    slug: str
    cover_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    content: list[dict[str, Any]] = Field(default_factory=list)
    word_count: int = 0
    reading_time: int = 1
    clap_count: int = 0
    response_count: int = 0
    allow_responses: bool = True
    visibility: str = PostVisibility.PUBLIC.value
    is_published: bool = False
    is_locked: bool = False
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: PostAuthor | None = None

    model_config = ConfigDict(from_attributes=True)


class PostPagination(BaseModel):
    """Pagination block of the post feed."""

    total: int
    page: int
    limit: int


class PostListResponse(BaseModel):
    """A page of the post feed."""

    items: list[PostResponse]
    pagination: PostPagination


class DraftListResponse(BaseModel):
    """The viewer's unpublished posts."""

    items: list[PostResponse]


class AuthorPostsResponse(BaseModel):
    """Published posts of one author as seen by the viewer."""

    author: PostAuthor
    posts: list[PostResponse]


class ClapResponse(BaseModel):
    """Updated clap counter."""

    clap_count: int


class ReportCreate(BaseModel):
    """A reader's report on a post; text is trimmed and truncated server-side."""

    reason: str = ""
    details: str | None = None


class ReportResponse(BaseModel):
    reported: bool
