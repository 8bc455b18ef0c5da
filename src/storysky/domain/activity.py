"""Activity record domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from storysky.domain.timestamps import format_timestamp, parse_timestamp, utc_now


@dataclass(frozen=True)
class ActivityRecord:
    """A single story view by a user. Never mutated once written."""

    user_id: str
    viewed_story_id: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_record(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "viewedStoryId": self.viewed_story_id,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "ActivityRecord":
        return cls(
            user_id=data["userId"],
            viewed_story_id=data["viewedStoryId"],
            timestamp=parse_timestamp(data["timestamp"]),
        )
