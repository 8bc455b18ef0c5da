"""Comment domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from storysky.domain.timestamps import format_timestamp, parse_timestamp, utc_now


@dataclass
class Comment:
    """A comment attached to a story."""

    id: str
    story_id: str
    author_id: str
    text: str
    created_at: datetime = field(default_factory=utc_now)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "storyId": self.story_id,
            "authorId": self.author_id,
            "text": self.text,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=data["id"],
            story_id=data["storyId"],
            author_id=data["authorId"],
            text=data["text"],
            created_at=parse_timestamp(data["createdAt"]),
        )
