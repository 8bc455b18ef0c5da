"""Append-only activity log of story views, one JSON record per line."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from storysky.domain.activity import ActivityRecord
from storysky.domain.errors import require

logger = logging.getLogger(__name__)


class ActivityLog(ABC):
    """Line-delimited JSON log. Records are never rewritten or removed."""

    name: str = "abstract"

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def _append_line(self, line: str) -> None:
        """Persist one serialized record."""

    @abstractmethod
    def _read_lines(self) -> list[str]:
        """Return every stored line in write order."""

    def record_activity(self, user_id: str | None, viewed_story_id: str | None) -> ActivityRecord:
        """Append a view of a story by a user.

        Args:
            user_id: Viewing user's id
            viewed_story_id: Viewed story's id

        Returns:
            The appended record

        Raises:
            ValidationError: If either id is missing or empty
        """
        require(user_id, viewed_story_id, message="userId and viewedStoryId are required")
        record = ActivityRecord(user_id=user_id, viewed_story_id=viewed_story_id)
        with self._lock:
            self._append_line(json.dumps(record.to_record()))
        return record

    def read_all(self) -> list[ActivityRecord]:
        """Parse the whole log, skipping blank and malformed lines."""
        with self._lock:
            lines = self._read_lines()

        records = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(ActivityRecord.from_record(json.loads(line)))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed activity line {lineno}: {e}")
        return records

    def get_user_history(self, user_id: str) -> list[ActivityRecord]:
        """Records for one user, oldest first."""
        return [r for r in self.read_all() if r.user_id == user_id]


class FileActivityLog(ActivityLog):
    """Activity log backed by a file opened in append mode."""

    name = "file"

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _append_line(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            return f.read().splitlines()

    def truncate(self) -> None:
        """Empty the log file. Only used by maintenance scripts."""
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("", encoding="utf-8")


class MemoryActivityLog(ActivityLog):
    """Activity log kept as serialized lines in memory."""

    name = "memory"

    def __init__(self) -> None:
        super().__init__()
        self._lines: list[str] = []

    def _append_line(self, line: str) -> None:
        self._lines.append(line)

    def _read_lines(self) -> list[str]:
        return list(self._lines)
