"""Story domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from storysky.domain.errors import ValidationError
from storysky.domain.timestamps import format_timestamp, parse_timestamp, utc_now


@dataclass
class Story:
    """A short story posted by a user."""

    id: str
    title: str
    body: str
    author_id: str
    genre: str = ""
    likes: int = 0
    created_at: datetime = field(default_factory=utc_now)

    def matches(self, text: str) -> bool:
        """Case-insensitive search over title and body."""
        return text.lower() in f"{self.title} {self.body}".lower()

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "authorId": self.author_id,
            "genre": self.genre,
            "likes": self.likes,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Story":
        """Create Story from its persisted JSON record."""
        return cls(
            id=data["id"],
            title=data["title"],
            body=data["body"],
            author_id=data["authorId"],
            genre=data.get("genre") or "",
            likes=int(data.get("likes") or 0),
            created_at=parse_timestamp(data["createdAt"]),
        )


@dataclass
class StoryPatch:
    """Partial update for a story. None leaves the stored value unchanged."""

    title: str | None = None
    body: str | None = None
    genre: str | None = None
    likes: int | None = None

    def validate(self) -> None:
        if self.likes is not None and self.likes < 0:
            raise ValidationError("likes must be a non-negative integer")

    def apply(self, story: Story) -> None:
        if self.title is not None:
            story.title = self.title
        if self.body is not None:
            story.body = self.body
        if self.genre is not None:
            story.genre = self.genre
        if self.likes is not None:
            story.likes = self.likes
