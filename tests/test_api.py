"""
Tests for the feed API.
"""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from flourish_cache.api import dependencies
from flourish_cache.api.app import create_app
from flourish_cache.query_cache import QueryCache
from flourish_cache.repositories import InMemoryMediaRepository


@pytest.fixture
def repo():
    return InMemoryMediaRepository.create()


@pytest.fixture
def client(repo):
    """Create a test client backed by the in-memory store."""
    app = create_app(content_store=repo, interaction_store=repo, cache=QueryCache(default_ttl=300))
    with TestClient(app) as test_client:
        yield test_client


def _first_id(repo, media_type="stream"):
    return next(item.id for item in repo.media if item.type == media_type)


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "FlourishTalents Feed API"
    assert "media" in data["endpoints"]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_entries": 0}


def test_get_media_page(client):
    response = client.get("/media/stream")
    assert response.status_code == 200

    data = response.json()
    assert data["media_type"] == "stream"
    assert data["page"] == 1
    assert data["page_size"] == 12
    assert data["total_count"] == 4
    assert data["total_pages"] == 1
    assert data["has_next"] is False
    assert data["from_cache"] is False
    assert len(data["items"]) == 4

    item = data["items"][0]
    assert item["is_liked"] is False
    assert item["is_followed"] is False
    assert item["thumbnail_srcset"].endswith("800w")


def test_second_request_served_from_cache(client, repo):
    client.get("/media/listen")
    response = client.get("/media/listen")

    assert response.json()["from_cache"] is True
    assert repo.calls["fetch_page"] == 1


def test_get_media_page_with_filters(client):
    response = client.get("/media/stream", params={"category": "movie", "premium": "true"})
    data = response.json()

    assert response.status_code == 200
    assert data["category"] == "movie"
    assert [item["title"] for item in data["items"]] == ["Midnight in Paris"]


def test_unknown_media_type(client):
    response = client.get("/media/podcasts")
    assert response.status_code == 400


def test_invalid_page(client):
    response = client.get("/media/stream", params={"page": 0})
    assert response.status_code == 400


def test_remote_failure_returns_502(client, repo):
    repo.fail("fetch_page")
    response = client.get("/media/blog")
    assert response.status_code == 502


def test_like_requires_user(client, repo):
    response = client.post(f"/media/{_first_id(repo)}/like")
    assert response.status_code == 401


def test_like_and_unlike(client, repo):
    media_id = _first_id(repo)
    headers = {"X-User-Id": "u1"}

    response = client.post(f"/media/{media_id}/like", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "active": True, "message": "Media liked"}

    page = client.get("/media/stream", headers=headers).json()
    liked = [item["id"] for item in page["items"] if item["is_liked"]]
    assert liked == [media_id]

    response = client.delete(f"/media/{media_id}/like", headers=headers)
    assert response.json()["active"] is False

    page = client.get("/media/stream", headers=headers).json()
    assert not any(item["is_liked"] for item in page["items"])


def test_follow_and_interactions(client):
    headers = {"X-User-Id": "u1"}

    response = client.post("/creators/Sia/follow", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Creator followed"

    response = client.get("/users/u1/interactions")
    assert response.status_code == 200
    assert response.json() == {"user_id": "u1", "liked_media_ids": [], "followed_creators": ["Sia"]}

    response = client.delete("/creators/Sia/follow", headers=headers)
    assert response.json()["message"] == "Creator unfollowed"


def test_write_failure_returns_502(client, repo):
    repo.fail("add_follow")
    response = client.post("/creators/Sia/follow", headers={"X-User-Id": "u1"})
    assert response.status_code == 502


def test_realtime_change_invalidates_users(client):
    client.get("/media/stream", headers={"X-User-Id": "u1"})
    client.get("/media/stream", headers={"X-User-Id": "u2"})

    response = client.post(
        "/realtime/changes",
        json={
            "type": "INSERT",
            "table": "media_likes",
            "schema": "public",
            "record": {"user_id": "u3", "media_id": "m1"},
            "old_record": None,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"accepted": True, "invalidated_users": 2}
    assert client.get("/cache/stats").json()["known_users"] == 0


def test_realtime_change_on_other_table(client):
    client.get("/media/stream", headers={"X-User-Id": "u1"})

    response = client.post("/realtime/changes", json={"type": "UPDATE", "table": "media_content"})

    assert response.json()["invalidated_users"] == 0


def test_realtime_change_requires_table(client):
    response = client.post("/realtime/changes", json={"type": "INSERT"})
    assert response.status_code == 422


def test_webhook_secret(monkeypatch, repo):
    monkeypatch.setattr(dependencies, "settings", replace(dependencies.settings, webhook_secret="s3cret"))
    app = create_app(content_store=repo, interaction_store=repo, cache=QueryCache(default_ttl=300))
    payload = {"type": "INSERT", "table": "media_likes"}

    with TestClient(app) as client:
        assert client.post("/realtime/changes", json=payload).status_code == 401
        assert (
            client.post("/realtime/changes", json=payload, headers={"X-Webhook-Secret": "wrong"}).status_code
            == 401
        )
        response = client.post("/realtime/changes", json=payload, headers={"X-Webhook-Secret": "s3cret"})
        assert response.status_code == 200


def test_stats_and_clear(client):
    client.get("/media/stream")
    client.get("/media/stream", headers={"X-User-Id": "u1"})

    stats = client.get("/cache/stats").json()
    assert stats == {"total_entries": 2, "ttl_seconds": 300.0, "page_size": 12, "known_users": 1}

    response = client.delete("/cache")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get("/cache/stats").json()["total_entries"] == 0


def test_interactions_unexpected_error_returns_500(repo):
    class MalformedStore(InMemoryMediaRepository):
        async def fetch_liked_media_ids(self, user_id):
            return None

    app = create_app(content_store=repo, interaction_store=MalformedStore(), cache=QueryCache(default_ttl=300))

    with TestClient(app) as client:
        response = client.get("/users/u1/interactions")

    assert response.status_code == 500


def test_interactions_remote_failure_returns_502(client, repo):
    repo.fail("fetch_followed_creators")
    response = client.get("/users/u1/interactions")
    assert response.status_code == 502
