"""Pydantic schemas for API request/response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storysky.domain.story import StoryPatch
from storysky.domain.timestamps import format_timestamp
from storysky.domain.user import User
from storysky.domain.views import CommentView, StoryView


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- requests ---
# Every field is optional and routes accept a missing body, so that story
# lookups (404) happen before field checks (400) and missing values reach the
# store's own validation with its error message.


class StoryCreateRequest(CamelModel):
    title: str | None = None
    body: str | None = None
    author_id: str | None = None
    genre: str | None = None


class StoryUpdateRequest(CamelModel):
    """Partial story update; omitted or null fields are left unchanged."""

    title: str | None = None
    body: str | None = None
    genre: str | None = None
    likes: int | None = None

    def to_patch(self) -> StoryPatch:
        return StoryPatch(title=self.title, body=self.body, genre=self.genre, likes=self.likes)


class CommentCreateRequest(CamelModel):
    author_id: str | None = None
    text: str | None = None


class UserCreateRequest(CamelModel):
    name: str | None = None
    email: str | None = None


class ActivityRequest(CamelModel):
    user_id: str | None = None
    viewed_story_id: str | None = None


# --- responses ---


class CommentResponse(CamelModel):
    """Response schema for a comment."""

    id: str
    story_id: str
    author_id: str
    text: str
    created_at: str
    author_name: str

    @classmethod
    def from_view(cls, view: CommentView) -> "CommentResponse":
        c = view.comment
        return cls(
            id=c.id,
            story_id=c.story_id,
            author_id=c.author_id,
            text=c.text,
            created_at=format_timestamp(c.created_at),
            author_name=view.author_name,
        )


class StoryResponse(CamelModel):
    """Response schema for a story."""

    id: str
    title: str
    body: str
    author_id: str
    genre: str
    likes: int
    created_at: str
    author_name: str

    @classmethod
    def fields_from_view(cls, view: StoryView) -> dict[str, Any]:
        s = view.story
        return {
            "id": s.id,
            "title": s.title,
            "body": s.body,
            "author_id": s.author_id,
            "genre": s.genre,
            "likes": s.likes,
            "created_at": format_timestamp(s.created_at),
            "author_name": view.author_name,
        }

    @classmethod
    def from_view(cls, view: StoryView) -> "StoryResponse":
        return cls(**cls.fields_from_view(view))


class StoryDetailResponse(StoryResponse):
    """Story with its comments attached."""

    comments: list[CommentResponse]

    @classmethod
    def from_view(cls, view: StoryView) -> "StoryDetailResponse":
        return cls(
            **cls.fields_from_view(view),
            comments=[CommentResponse.from_view(c) for c in view.comments or []],
        )


class ListMeta(BaseModel):
    total: int


class StoryListResponse(BaseModel):
    """Response schema for the story listing."""

    data: list[StoryResponse]
    meta: ListMeta


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    bio: str
    avatar_url: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            bio=user.bio,
            avatar_url=user.avatar_url,
        )


class MessageResponse(BaseModel):
    message: str


class PublicKeyResponse(CamelModel):
    public_key: str


class ErrorResponse(BaseModel):
    """Envelope for every error response."""

    error: str


# OpenAPI documentation for the {"error": ...} envelope
BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Missing or invalid field"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Referenced id does not exist"}}
