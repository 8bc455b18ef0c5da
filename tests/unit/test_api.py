"""End-to-end tests for the HTTP API over an ASGI transport."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from storysky.config import Settings
from storysky.main import create_app


async def _create_user(client: AsyncClient, name: str = "Ada") -> dict:
    response = await client.post("/api/users", json={"name": name})
    assert response.status_code == 201
    return response.json()


async def _create_story(client: AsyncClient, author_id: str, **fields) -> dict:
    body = {"title": "T", "body": "B", "authorId": author_id, **fields}
    response = await client.post("/api/stories", json=body)
    assert response.status_code == 201
    return response.json()


class TestStoryLifecycle:
    """The full create/like/comment/delete walk-through."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, client):
        ada = await _create_user(client)
        assert ada["bio"] == ""
        assert ada["email"] == ""
        assert ada["avatarUrl"] == ""

        story = await _create_story(client, ada["id"])
        assert story["likes"] == 0
        assert story["genre"] == ""
        assert story["authorName"] == "Ada"

        response = await client.get(f"/api/stories/{story['id']}")
        assert response.status_code == 200
        detail = response.json()
        assert detail["authorName"] == "Ada"
        assert detail["comments"] == []

        for _ in range(2):
            response = await client.post(f"/api/stories/{story['id']}/like")
        assert response.json()["likes"] == 2

        response = await client.post(
            f"/api/stories/{story['id']}/comments",
            json={"authorId": ada["id"], "text": "hi"},
        )
        assert response.status_code == 201
        assert response.json()["authorName"] == "Ada"
        assert response.json()["storyId"] == story["id"]

        response = await client.delete(f"/api/stories/{story['id']}")
        assert response.status_code == 204
        assert response.content == b""

        response = await client.get(f"/api/stories/{story['id']}")
        assert response.status_code == 404
        assert response.json() == {"error": "Story not found"}

        response = await client.get(f"/api/stories/{story['id']}/comments")
        assert response.status_code == 404


class TestStoryEndpoints:
    """Tests for story listing, updates and validation."""

    @pytest.mark.asyncio
    async def test_list_envelope(self, client):
        response = await client.get("/api/stories")
        body = response.json()
        assert body["meta"] == {"total": 1}
        assert body["data"][0]["id"] == "s1"
        assert body["data"][0]["authorName"] == "Meghana M"

    @pytest.mark.asyncio
    async def test_search(self, client):
        await _create_story(client, "u1", title="Dragons", body="fire")
        response = await client.get("/api/stories", params={"q": "DRAGON"})
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["title"] == "Dragons"

    @pytest.mark.asyncio
    async def test_new_story_listed_first(self, client):
        story = await _create_story(client, "u1")
        response = await client.get("/api/stories")
        assert response.json()["data"][0]["id"] == story["id"]

    @pytest.mark.asyncio
    async def test_create_story_missing_fields(self, client):
        response = await client.post("/api/stories", json={"title": "T"})
        assert response.status_code == 400
        assert response.json() == {"error": "title, body, authorId required"}

    @pytest.mark.asyncio
    async def test_create_story_notifies_subscribers(self, client, mock_webpush):
        await client.post("/subscribe", json={"endpoint": "https://push.example/a"})
        mock_webpush.reset_mock()

        await _create_story(client, "u1", title="Fresh")

        payload = json.loads(mock_webpush.call_args.kwargs["data"])
        assert payload == {"title": "New Story!", "body": "Fresh"}

    @pytest.mark.asyncio
    async def test_push_failure_does_not_fail_create(self, client, mock_webpush):
        await client.post("/subscribe", json={"endpoint": "https://push.example/a"})
        mock_webpush.side_effect = RuntimeError("push service down")

        response = await client.post(
            "/api/stories", json={"title": "T", "body": "B", "authorId": "u1"}
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_update_partial(self, client):
        response = await client.put("/api/stories/s1", json={"genre": "Horror", "likes": 10})
        assert response.status_code == 200
        body = response.json()
        assert body["genre"] == "Horror"
        assert body["likes"] == 10
        assert body["title"] == "A Moonlit Night"

    @pytest.mark.asyncio
    async def test_update_missing_story(self, client):
        response = await client.put("/api/stories/nope", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_rejects_negative_likes(self, client):
        response = await client.put("/api/stories/s1", json={"likes": -1})
        assert response.status_code == 400
        assert "likes" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_update_without_body_changes_nothing(self, client):
        before = (await client.get("/api/stories/s1")).json()

        response = await client.put("/api/stories/s1")

        assert response.status_code == 200
        assert response.json()["title"] == before["title"]
        assert response.json()["likes"] == before["likes"]

    @pytest.mark.asyncio
    async def test_update_missing_story_with_invalid_likes(self, client):
        response = await client.put("/api/stories/nope", json={"likes": -1})
        assert response.status_code == 404
        assert response.json() == {"error": "Story not found"}

    @pytest.mark.asyncio
    async def test_update_missing_story_without_body(self, client):
        response = await client.put("/api/stories/nope")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_story_without_body(self, client):
        response = await client.post("/api/stories")
        assert response.status_code == 400
        assert response.json() == {"error": "title, body, authorId required"}

    @pytest.mark.asyncio
    async def test_like_missing_story(self, client):
        response = await client.post("/api/stories/nope/like")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_story(self, client):
        response = await client.delete("/api/stories/nope")
        assert response.status_code == 404


class TestCommentEndpoints:
    """Tests for comment endpoints."""

    @pytest.mark.asyncio
    async def test_comment_on_missing_story(self, client):
        response = await client.post(
            "/api/stories/nope/comments", json={"authorId": "u1", "text": "hi"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_comment_missing_text(self, client):
        response = await client.post("/api/stories/s1/comments", json={"authorId": "u1"})
        assert response.status_code == 400
        assert response.json() == {"error": "authorId and text required"}

    @pytest.mark.asyncio
    async def test_comment_without_body_on_missing_story(self, client):
        response = await client.post("/api/stories/nope/comments")
        assert response.status_code == 404
        assert response.json() == {"error": "Story not found"}

    @pytest.mark.asyncio
    async def test_comment_without_body(self, client):
        response = await client.post("/api/stories/s1/comments")
        assert response.status_code == 400
        assert response.json() == {"error": "authorId and text required"}

    @pytest.mark.asyncio
    async def test_list_and_delete_comment(self, client):
        created = await client.post(
            "/api/stories/s1/comments", json={"authorId": "u1", "text": "hi"}
        )
        comment_id = created.json()["id"]

        listed = await client.get("/api/stories/s1/comments")
        assert [c["id"] for c in listed.json()] == [comment_id]

        response = await client.delete(f"/api/comments/{comment_id}")
        assert response.status_code == 204

        response = await client.delete(f"/api/comments/{comment_id}")
        assert response.status_code == 404
        assert response.json() == {"error": "Comment not found"}


class TestUserEndpoints:
    """Tests for user endpoints."""

    @pytest.mark.asyncio
    async def test_get_seed_user(self, client):
        response = await client.get("/api/users/u1")
        assert response.json()["name"] == "Meghana M"
        assert response.json()["bio"] == "Student"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, client):
        response = await client.get("/api/users/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_create_user_requires_name(self, client):
        response = await client.post("/api/users", json={"email": "a@b.c"})
        assert response.status_code == 400
        assert response.json() == {"error": "name required"}

    @pytest.mark.asyncio
    async def test_create_user_without_body(self, client):
        response = await client.post("/api/users")
        assert response.status_code == 400
        assert response.json() == {"error": "name required"}

    @pytest.mark.asyncio
    async def test_create_user_keeps_email(self, client):
        response = await client.post("/api/users", json={"name": "Ada", "email": "a@b.c"})
        assert response.json()["email"] == "a@b.c"


class TestActivityEndpoints:
    """Tests for activity recording and recommendations."""

    @pytest.mark.asyncio
    async def test_recommend_without_history(self, client):
        response = await client.get("/api/recommend/u1")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_record_activity_requires_ids(self, client):
        response = await client.post("/api/userActivity", json={"userId": "u1"})
        assert response.status_code == 400
        assert response.json() == {"error": "userId and viewedStoryId are required"}

    @pytest.mark.asyncio
    async def test_recommend_by_last_genre(self, client, settings):
        response = await client.post(
            "/api/userActivity", json={"userId": "u1", "viewedStoryId": "s1"}
        )
        assert response.json() == {"message": "User activity recorded"}

        fantasy_a = await _create_story(client, "u1", genre="Fantasy")
        fantasy_b = await _create_story(client, "u1", genre="Fantasy")
        await _create_story(client, "u1", genre="Horror")

        response = await client.get("/api/recommend/u1")

        ids = [s["id"] for s in response.json()]
        assert sorted(ids) == sorted([fantasy_a["id"], fantasy_b["id"]])
        with open(settings.activity_file) as f:
            assert len(f.read().splitlines()) == 1


class TestPushEndpoints:
    """Tests for subscription endpoints."""

    @pytest.mark.asyncio
    async def test_subscribe_sends_test_notification(self, client, mock_webpush):
        response = await client.post("/subscribe", json={"endpoint": "https://push.example/a"})
        assert response.status_code == 201
        assert response.json() == {}
        payload = json.loads(mock_webpush.call_args.kwargs["data"])
        assert payload["title"] == "New Story!"

    @pytest.mark.asyncio
    async def test_subscribe_without_endpoint(self, client, mock_webpush):
        response = await client.post("/subscribe", json={"keys": {}})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid subscription object"}
        mock_webpush.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribe_without_body(self, client):
        response = await client.post("/subscribe")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_public_key(self, client):
        response = await client.get("/vapidPublicKey")
        assert response.json() == {"publicKey": "test-public-key"}


class TestAppAssembly:
    """Tests for create_app wiring and error mapping."""

    def test_missing_vapid_file_is_fatal(self, tmp_path):
        settings = Settings(_env_file=None, vapid_file=str(tmp_path / "missing.json"))
        with pytest.raises(RuntimeError):
            create_app(settings)

    @pytest.mark.asyncio
    async def test_state_survives_restart(self, settings):
        first = create_app(settings)
        async with AsyncClient(transport=ASGITransport(app=first), base_url="http://test") as c:
            story = await _create_story(c, "u1", title="Persisted")

        second = create_app(settings)
        async with AsyncClient(transport=ASGITransport(app=second), base_url="http://test") as c:
            response = await c.get(f"/api/stories/{story['id']}")

        assert response.json()["title"] == "Persisted"

    @pytest.mark.asyncio
    async def test_memory_backend_writes_nothing(self, tmp_path, vapid_file):
        settings = Settings(
            _env_file=None,
            storage_backend="memory",
            data_file=str(tmp_path / "data.json"),
            activity_file=str(tmp_path / "activity.json"),
            vapid_file=str(vapid_file),
        )
        app = create_app(settings)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            await _create_story(c, "u1")
            await c.post("/api/userActivity", json={"userId": "u1", "viewedStoryId": "s1"})

        assert not (tmp_path / "data.json").exists()
        assert not (tmp_path / "activity.json").exists()

    @pytest.mark.asyncio
    async def test_unhandled_error_maps_to_500(self, app):
        def broken_save(document):
            raise OSError("disk full")

        app.state.store._gateway.save = broken_save
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/api/stories/s1/like")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert app.state.store.get_story("s1").story.likes == 3

    @pytest.mark.asyncio
    async def test_openapi_documents_error_envelope(self, client):
        schema = (await client.get("/openapi.json")).json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        update = schema["paths"]["/api/stories/{story_id}"]["put"]["responses"]
        assert update["404"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }
        assert "400" in update

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client):
        response = await client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_non_object_body_is_400(self, client):
        response = await client.post("/api/users", json=["Ada"])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy", "storage": "file"}
