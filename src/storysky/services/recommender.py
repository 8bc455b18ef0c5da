"""Genre-based story recommendations from a user's view history."""

import logging

from storysky.domain.views import StoryView
from storysky.infrastructure.activity_log import ActivityLog
from storysky.repositories.entity_store import EntityStore

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 3


class Recommender:
    """Recommends stories sharing the genre of the user's last viewed story.

    Only the most recent view counts and results are not ranked beyond
    collection order.
    """

    def __init__(
        self,
        store: EntityStore,
        activity_log: ActivityLog,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> None:
        self.store = store
        self.activity_log = activity_log
        self.limit = limit

    def recommend(self, user_id: str) -> list[StoryView]:
        """Return up to `limit` stories for a user; empty when nothing applies."""
        history = self.activity_log.get_user_history(user_id)
        if not history:
            return []

        last_viewed = history[-1]
        viewed = self.store.find_story(last_viewed.viewed_story_id)
        if viewed is None:
            logger.debug(
                f"Last story viewed by {user_id} ({last_viewed.viewed_story_id}) is gone"
            )
            return []

        return self.store.stories_in_genre(
            viewed.story.genre, exclude_id=viewed.story.id, limit=self.limit
        )
