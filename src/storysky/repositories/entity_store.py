"""Entity store: the authoritative story, user and comment collections."""

import copy
import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from storysky.domain.comment import Comment
from storysky.domain.errors import NotFoundError, require
from storysky.domain.story import Story, StoryPatch
from storysky.domain.user import UNKNOWN_AUTHOR, User
from storysky.domain.views import CommentView, StoryView
from storysky.infrastructure.document_store import Document, DocumentStore

logger = logging.getLogger(__name__)

STORY_NOT_FOUND = "Story not found"
COMMENT_NOT_FOUND = "Comment not found"
USER_NOT_FOUND = "User not found"


class EntityStore:
    """In-memory collections with cascade rules and flush-on-write.

    Every mutation flushes the full document through the gateway before
    returning; a mutation whose flush fails is rolled back, so memory never
    holds state the document does not. All operations hold one re-entrant
    lock, so concurrent callers observe the same serial order the document
    is written in.
    """

    def __init__(
        self,
        gateway: DocumentStore,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the store from the gateway's persisted document.

        Args:
            gateway: Persistence gateway to load from and flush to
            id_factory: Generator for new ids (defaults to uuid4 strings)
        """
        self._gateway = gateway
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))
        # Single writer boundary. The async route handlers call in here (and
        # flush to disk) on the event loop, which serializes requests on
        # purpose; the lock covers scripts and background threads as well.
        self._lock = threading.RLock()

        document = gateway.load()
        self._stories: list[Story] = document.stories
        self._users: list[User] = document.users
        self._comments: list[Comment] = document.comments
        logger.info(
            f"Loaded {len(self._stories)} stories, {len(self._users)} users, "
            f"{len(self._comments)} comments from {gateway.name} storage"
        )

    # --- internals ---

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Apply a change, then flush it; restore the prior state if either fails."""
        with self._lock:
            saved = copy.deepcopy((self._stories, self._users, self._comments))
            try:
                yield
                self._gateway.save(
                    Document(stories=self._stories, users=self._users, comments=self._comments)
                )
            except BaseException:
                self._stories, self._users, self._comments = saved
                raise

    def _fresh_id(self, existing: list) -> str:
        taken = {item.id for item in existing}
        new_id = self._new_id()
        while new_id in taken:
            new_id = self._new_id()
        return new_id

    def _author_name(self, author_id: str) -> str:
        user = next((u for u in self._users if u.id == author_id), None)
        return user.name if user else UNKNOWN_AUTHOR

    def _find_story(self, story_id: str) -> Story:
        story = next((s for s in self._stories if s.id == story_id), None)
        if story is None:
            raise NotFoundError(STORY_NOT_FOUND)
        return story

    def _story_view(self, story: Story) -> StoryView:
        return StoryView(story=copy.copy(story), author_name=self._author_name(story.author_id))

    def _comment_view(self, comment: Comment) -> CommentView:
        return CommentView(
            comment=copy.copy(comment), author_name=self._author_name(comment.author_id)
        )

    def _comments_for(self, story_id: str) -> list[CommentView]:
        return [self._comment_view(c) for c in self._comments if c.story_id == story_id]

    # --- stories ---

    def list_stories(self, filter_text: str | None = None) -> list[StoryView]:
        """List stories newest first, optionally filtered by title/body text."""
        with self._lock:
            stories = self._stories
            if filter_text:
                stories = [s for s in stories if s.matches(filter_text)]
            return [self._story_view(s) for s in stories]

    def get_story(self, story_id: str) -> StoryView:
        """Get a story with its comments attached."""
        with self._lock:
            view = self._story_view(self._find_story(story_id))
            view.comments = self._comments_for(story_id)
            return view

    def find_story(self, story_id: str) -> StoryView | None:
        """Get a story without comments, or None if it does not exist."""
        with self._lock:
            try:
                return self._story_view(self._find_story(story_id))
            except NotFoundError:
                return None

    def stories_in_genre(self, genre: str, exclude_id: str, limit: int) -> list[StoryView]:
        """Stories sharing a genre, in collection order, minus one excluded id."""
        with self._lock:
            matches = [s for s in self._stories if s.genre == genre and s.id != exclude_id]
            return [self._story_view(s) for s in matches[:limit]]

    def create_story(
        self,
        title: str | None,
        body: str | None,
        author_id: str | None,
        genre: str | None = None,
    ) -> StoryView:
        """Create a story at the head of the collection.

        Raises:
            ValidationError: If title, body or author_id is missing or empty
        """
        require(title, body, author_id, message="title, body, authorId required")
        with self._mutation():
            story = Story(
                id=self._fresh_id(self._stories),
                title=title,
                body=body,
                author_id=author_id,
                genre=genre or "",
            )
            self._stories.insert(0, story)
            logger.info(f"Created story {story.id}")
            return self._story_view(story)

    def update_story(self, story_id: str, patch: StoryPatch) -> StoryView:
        """Apply a partial update; unset fields keep their stored values.

        Raises:
            NotFoundError: If the story does not exist (checked first)
            ValidationError: If the patch sets a negative like count
        """
        with self._mutation():
            story = self._find_story(story_id)
            patch.validate()
            patch.apply(story)
            return self._story_view(story)

    def delete_story(self, story_id: str) -> None:
        """Delete a story and cascade to its comments."""
        with self._mutation():
            story = self._find_story(story_id)
            self._stories = [s for s in self._stories if s.id != story.id]
            remaining = [c for c in self._comments if c.story_id != story.id]
            removed = len(self._comments) - len(remaining)
            self._comments = remaining
        logger.info(f"Deleted story {story.id} and {removed} comment(s)")

    def like_story(self, story_id: str) -> StoryView:
        with self._mutation():
            story = self._find_story(story_id)
            story.likes += 1
            return self._story_view(story)

    # --- comments ---

    def list_comments(self, story_id: str) -> list[CommentView]:
        with self._lock:
            self._find_story(story_id)
            return self._comments_for(story_id)

    def create_comment(
        self,
        story_id: str,
        author_id: str | None,
        text: str | None,
    ) -> CommentView:
        """Append a comment to an existing story.

        Raises:
            NotFoundError: If the story does not exist (checked first)
            ValidationError: If author_id or text is missing or empty
        """
        with self._mutation():
            story = self._find_story(story_id)
            require(author_id, text, message="authorId and text required")
            comment = Comment(
                id=self._fresh_id(self._comments),
                story_id=story.id,
                author_id=author_id,
                text=text,
            )
            self._comments.append(comment)
            return self._comment_view(comment)

    def delete_comment(self, comment_id: str) -> None:
        with self._mutation():
            remaining = [c for c in self._comments if c.id != comment_id]
            if len(remaining) == len(self._comments):
                raise NotFoundError(COMMENT_NOT_FOUND)
            self._comments = remaining

    # --- users ---

    def get_user(self, user_id: str) -> User:
        with self._lock:
            user = next((u for u in self._users if u.id == user_id), None)
            if user is None:
                raise NotFoundError(USER_NOT_FOUND)
            return copy.copy(user)

    def create_user(self, name: str | None, email: str | None = None) -> User:
        """Register a user; email, bio and avatar default to empty.

        Raises:
            ValidationError: If name is missing or empty
        """
        require(name, message="name required")
        with self._mutation():
            user = User(id=self._fresh_id(self._users), name=name, email=email or "")
            self._users.append(user)
            return copy.copy(user)

    # --- persistence ---

    def snapshot(self) -> Document:
        """Detached deep copy of the current collections."""
        with self._lock:
            return copy.deepcopy(
                Document(stories=self._stories, users=self._users, comments=self._comments)
            )
