"""Locust load testing script for StorySky."""

import random

from locust import HttpUser, between, task

SEARCH_TERMS = ["moon", "night", "dragon", "city", "love", "ghost"]
GENRES = ["Fantasy", "Horror", "Romance", "Sci-Fi"]


class StorySkyUser(HttpUser):
    """Simulated reader/writer for load testing StorySky."""

    wait_time = between(1, 3)  # Wait 1-3 seconds between tasks

    def on_start(self) -> None:
        """Register a user so writes have an author."""
        response = self.client.post("/api/users", json={"name": "Load Tester"})
        self.user_id = response.json().get("id", "u1")

    def _random_story_id(self) -> str | None:
        stories = self.client.get("/api/stories", name="/api/stories").json()["data"]
        return random.choice(stories)["id"] if stories else None

    @task(4)
    def list_stories(self) -> None:
        """Fetch the story feed - most common operation."""
        self.client.get("/api/stories")

    @task(2)
    def search_stories(self) -> None:
        term = random.choice(SEARCH_TERMS)
        self.client.get(f"/api/stories?q={term}", name="/api/stories?q=[term]")

    @task(3)
    def read_story(self) -> None:
        """Open a story and record the view."""
        story_id = self._random_story_id()
        if story_id is None:
            return
        self.client.get(f"/api/stories/{story_id}", name="/api/stories/[id]")
        self.client.post(
            "/api/userActivity",
            json={"userId": self.user_id, "viewedStoryId": story_id},
        )

    @task(2)
    def recommendations(self) -> None:
        self.client.get(f"/api/recommend/{self.user_id}", name="/api/recommend/[user]")

    @task(1)
    def like_story(self) -> None:
        story_id = self._random_story_id()
        if story_id:
            self.client.post(f"/api/stories/{story_id}/like", name="/api/stories/[id]/like")

    @task(1)
    def post_story(self) -> None:
        """Write path: every create flushes the whole document."""
        self.client.post(
            "/api/stories",
            json={
                "title": f"Load story {random.randint(0, 10**6)}",
                "body": "Generated by locust.",
                "authorId": self.user_id,
                "genre": random.choice(GENRES),
            },
        )
