"""User domain entity."""

from dataclasses import dataclass
from typing import Any

UNKNOWN_AUTHOR = "Unknown"


@dataclass
class User:
    """A registered user. Users are never updated or deleted."""

    id: str
    name: str
    email: str = ""
    bio: str = ""
    avatar_url: str = ""

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "bio": self.bio,
            "avatarUrl": self.avatar_url,
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email") or "",
            bio=data.get("bio") or "",
            avatar_url=data.get("avatarUrl") or "",
        )
