"""Persistence gateway: the structured JSON document mirroring the entity store."""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from storysky.domain.comment import Comment
from storysky.domain.story import Story
from storysky.domain.user import User

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """The three persisted collections, in collection order."""

    stories: list[Story] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "stories": [s.to_record() for s in self.stories],
            "users": [u.to_record() for u in self.users],
            "comments": [c.to_record() for c in self.comments],
        }

    @classmethod
    def from_json(cls, data: Any) -> "Document":
        """Build a Document from parsed JSON.

        Raises:
            ValueError: If the payload is not a well-formed document
        """
        if not isinstance(data, dict):
            raise ValueError("document root must be an object")
        try:
            return cls(
                stories=[Story.from_record(s) for s in data.get("stories", [])],
                users=[User.from_record(u) for u in data.get("users", [])],
                comments=[Comment.from_record(c) for c in data.get("comments", [])],
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"malformed record: {e!r}") from e


def seed_document() -> Document:
    """Sample dataset used when nothing has been persisted yet."""
    return Document(
        stories=[
            Story(
                id="s1",
                title="A Moonlit Night",
                body="Once upon a moonlit night...",
                author_id="u1",
                genre="Fantasy",
                likes=3,
            )
        ],
        users=[User(id="u1", name="Meghana M", bio="Student")],
        comments=[],
    )


class DocumentStore(ABC):
    """Loads and overwrites the persisted document."""

    name: str = "abstract"

    @abstractmethod
    def load(self) -> Document:
        """Return the persisted document, or the seed dataset if there is none."""

    @abstractmethod
    def save(self, document: Document) -> None:
        """Overwrite the persisted document with a full snapshot."""


class MemoryDocumentStore(DocumentStore):
    """Keeps the last flushed document in process memory only."""

    name = "memory"

    def __init__(self, initial: Document | None = None) -> None:
        self._data: dict[str, Any] | None = initial.to_json() if initial else None

    def load(self) -> Document:
        if self._data is None:
            return seed_document()
        return Document.from_json(copy.deepcopy(self._data))

    def save(self, document: Document) -> None:
        self._data = document.to_json()

    @property
    def data(self) -> dict[str, Any] | None:
        """Raw JSON-compatible view of the last flush."""
        return self._data


class JsonFileDocumentStore(DocumentStore):
    """Single JSON file, replaced atomically on every flush."""

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Document:
        if not self.path.exists():
            logger.info(f"No data file at {self.path}, starting from seed data")
            return seed_document()

        try:
            with open(self.path, encoding="utf-8") as f:
                return Document.from_json(json.load(f))
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            backup = self._quarantine()
            logger.error(
                f"Could not load {self.path} ({e}); starting from seed data. "
                f"Unreadable file kept at {backup}"
            )
            return seed_document()

    def save(self, document: Document) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document.to_json(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _quarantine(self) -> Path | None:
        """Move an unreadable data file aside so the next flush cannot destroy it."""
        backup = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, backup)
        except OSError as e:
            logger.error(f"Failed to move {self.path} aside: {e}")
            return None
        return backup
