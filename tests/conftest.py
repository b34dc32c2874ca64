"""Shared fixtures for the test-suite."""

import asyncio

import pytest

from flourish_cache.errors import ContentFetchError
from flourish_cache.query_cache import QueryCache
from flourish_cache.realtime import ChangeFeed
from flourish_cache.repositories import InMemoryMediaRepository
from flourish_cache.services import FeedService

TTL = 300.0


class FakeClock:
    """Manually advanced clock; keeps whole milliseconds to avoid float drift."""

    def __init__(self) -> None:
        self.ms = 0

    def __call__(self) -> float:
        return self.ms / 1000

    def advance(self, ms: int) -> None:
        self.ms += ms


class GatedContentStore:
    """Content store whose pages resolve only when released by the test."""

    def __init__(self, total: int = 30) -> None:
        self.total = total
        self.failing: set[int] = set()
        self._gates: dict[int, asyncio.Event] = {}

    def _gate(self, offset: int) -> asyncio.Event:
        return self._gates.setdefault(offset, asyncio.Event())

    def release(self, offset: int) -> None:
        self._gate(offset).set()

    async def fetch_page(self, media_type, offset, limit, category=None, premium=None):
        await self._gate(offset).wait()
        if offset in self.failing:
            raise ContentFetchError(media_type, "gated failure")
        rows = [
            {
                "id": f"{media_type}-{offset + i}",
                "title": f"Item {offset + i}",
                "creator_name": "Creator",
                "thumbnail_url": "",
                "type": media_type,
                "category": "all",
                "content_type": "video",
            }
            for i in range(min(limit, max(0, self.total - offset)))
        ]
        return rows, self.total


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(default_ttl=TTL, clock=clock)


@pytest.fixture
def repo():
    return InMemoryMediaRepository.create()


@pytest.fixture
def gated_store():
    return GatedContentStore()


@pytest.fixture
def change_feed():
    return ChangeFeed()


@pytest.fixture
def feed(repo, cache, change_feed):
    return FeedService.create(
        content_store=repo,
        interaction_store=repo,
        cache=cache,
        page_size=12,
        change_feed=change_feed,
    )

