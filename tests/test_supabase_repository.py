"""
Tests for the PostgREST repositories, against a mocked transport.
"""

import asyncio
import json

import httpx
import pytest

from flourish_cache.entities import MEDIA_FIELDS
from flourish_cache.errors import ContentFetchError, InteractionFetchError, InteractionWriteError
from flourish_cache.repositories import (
    SupabaseContentRepository,
    SupabaseInteractionRepository,
    parse_content_range,
)

BASE_URL = "http://supabase.test/rest/v1"


class Recorder:
    """Mock transport handler that records requests and replays a response."""

    def __init__(self, status_code=200, json_body=None, headers=None, error=None):
        self.status_code = status_code
        self.json_body = [] if json_body is None else json_body
        self.headers = headers or {}
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.status_code in (201, 204):
            return httpx.Response(self.status_code, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(recorder: Recorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(recorder))


def _run(repository_cls, recorder, call):
    async def scenario():
        repository = repository_cls.create(client=_client(recorder))
        try:
            return await call(repository)
        finally:
            await repository.close()

    return asyncio.run(scenario())


@pytest.mark.parametrize(
    "header,expected",
    [
        ("0-11/57", 57),
        ("12-23/57", 57),
        ("*/0", 0),
        ("0-11/*", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_content_range(header, expected):
    assert parse_content_range(header) == expected


def test_fetch_page_request():
    rows = [{"id": "1", "title": "Unstoppable"}]
    recorder = Recorder(json_body=rows, headers={"Content-Range": "12-12/13"})

    result, total = _run(
        SupabaseContentRepository,
        recorder,
        lambda repo: repo.fetch_page("stream", offset=12, limit=12),
    )

    request = recorder.last
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/media_content"
    assert request.url.params["select"] == ",".join(MEDIA_FIELDS)
    assert request.url.params["type"] == "eq.stream"
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["offset"] == "12"
    assert request.url.params["limit"] == "12"
    assert "category" not in request.url.params
    assert "is_premium" not in request.url.params
    assert request.headers["Prefer"] == "count=exact"

    assert result == rows
    assert total == 13


def test_fetch_page_filters():
    recorder = Recorder(headers={"Content-Range": "*/0"})

    _run(
        SupabaseContentRepository,
        recorder,
        lambda repo: repo.fetch_page("listen", offset=0, limit=12, category="RnB", premium=False),
    )

    assert recorder.last.url.params["category"] == "eq.RnB"
    assert recorder.last.url.params["is_premium"] == "eq.false"


def test_fetch_page_without_total_falls_back():
    recorder = Recorder(json_body=[{"id": "a"}, {"id": "b"}])

    _, total = _run(
        SupabaseContentRepository,
        recorder,
        lambda repo: repo.fetch_page("blog", offset=24, limit=12),
    )

    assert total == 26


def test_fetch_page_error_status():
    recorder = Recorder(status_code=500, json_body={"message": "boom"})

    with pytest.raises(ContentFetchError) as exc_info:
        _run(SupabaseContentRepository, recorder, lambda repo: repo.fetch_page("stream", 0, 12))

    assert exc_info.value.media_type == "stream"


def test_fetch_page_transport_error():
    recorder = Recorder(error=httpx.ConnectError("connection refused"))

    with pytest.raises(ContentFetchError):
        _run(SupabaseContentRepository, recorder, lambda repo: repo.fetch_page("stream", 0, 12))


def test_fetch_liked_media_ids():
    recorder = Recorder(json_body=[{"media_id": "m1"}, {"media_id": "m2"}])

    liked = _run(SupabaseInteractionRepository, recorder, lambda repo: repo.fetch_liked_media_ids("u1"))

    assert liked == {"m1", "m2"}
    assert recorder.last.url.path == "/rest/v1/media_likes"
    assert recorder.last.url.params["select"] == "media_id"
    assert recorder.last.url.params["user_id"] == "eq.u1"


def test_fetch_followed_creators():
    recorder = Recorder(json_body=[{"creator_name": "Sia"}])

    followed = _run(SupabaseInteractionRepository, recorder, lambda repo: repo.fetch_followed_creators("u1"))

    assert followed == {"Sia"}
    assert recorder.last.url.path == "/rest/v1/creator_follows"
    assert recorder.last.url.params["follower_id"] == "eq.u1"


def test_interaction_fetch_error():
    recorder = Recorder(status_code=401, json_body={"message": "JWT expired"})

    with pytest.raises(InteractionFetchError) as exc_info:
        _run(SupabaseInteractionRepository, recorder, lambda repo: repo.fetch_liked_media_ids("u1"))

    assert exc_info.value.user_id == "u1"


def test_add_like():
    recorder = Recorder(status_code=201)

    _run(SupabaseInteractionRepository, recorder, lambda repo: repo.add_like("u1", "m1"))

    request = recorder.last
    assert request.method == "POST"
    assert request.url.path == "/rest/v1/media_likes"
    assert json.loads(request.content) == {"user_id": "u1", "media_id": "m1"}
    assert request.headers["Prefer"] == "return=minimal"


def test_duplicate_like_is_not_an_error():
    recorder = Recorder(status_code=409, json_body={"code": "23505"})

    _run(SupabaseInteractionRepository, recorder, lambda repo: repo.add_like("u1", "m1"))


def test_remove_follow():
    recorder = Recorder(status_code=204)

    _run(SupabaseInteractionRepository, recorder, lambda repo: repo.remove_follow("u1", "Sia"))

    request = recorder.last
    assert request.method == "DELETE"
    assert request.url.path == "/rest/v1/creator_follows"
    assert request.url.params["follower_id"] == "eq.u1"
    assert request.url.params["creator_name"] == "eq.Sia"


def test_write_error():
    recorder = Recorder(status_code=500, json_body={"message": "boom"})

    with pytest.raises(InteractionWriteError) as exc_info:
        _run(SupabaseInteractionRepository, recorder, lambda repo: repo.add_follow("u1", "Sia"))

    assert exc_info.value.action == "follow creator"
