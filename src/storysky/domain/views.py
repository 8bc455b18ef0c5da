"""Read models: entities enriched with display-only fields."""

from dataclasses import dataclass

from storysky.domain.comment import Comment
from storysky.domain.story import Story


@dataclass
class CommentView:
    comment: Comment
    author_name: str


@dataclass
class StoryView:
    """A story with its resolved author name and, for detail reads, comments."""

    story: Story
    author_name: str
    comments: list[CommentView] | None = None
