"""In-memory media store.

Implements both ContentStore and InteractionStore over plain Python
collections. Used by the demo script and the test-suite; it mimics the
database triggers that keep ``likes_count`` in step with ``media_likes``.
"""

import asyncio
import uuid
from collections import Counter
from typing import Any

from flourish_cache.entities import MEDIA_FIELDS, MediaItem
from flourish_cache.errors import ContentFetchError, InteractionFetchError, InteractionWriteError

_SEED_NAMESPACE = uuid.UUID("6f0b8f5e-3c1d-4a7e-9b2f-1d7c3e5a9b10")

_PEXELS = "https://images.pexels.com/photos/{0}/pexels-photo-{0}.jpeg"

# (title, creator, type, category, content_type, extra fields)
_SEED_ROWS: list[tuple[str, str, str, str, str, dict[str, Any]]] = [
    ("Unstoppable", "Sia", "stream", "music-video", "video",
     {"photo": 1105666, "duration": "3:37", "rating": 4.9, "views_count": 2847000, "plays_count": 1245000, "likes_count": 45230}),
    ("The Journey Home", "Emma Stone", "stream", "documentaries", "video",
     {"photo": 1415131, "duration": "45:22", "rating": 4.7, "views_count": 156000, "plays_count": 89000, "likes_count": 12400}),
    ("Midnight in Paris", "Woody Allen", "stream", "movie", "video",
     {"photo": 2166711, "duration": "1:34:12", "rating": 4.8, "is_premium": True, "views_count": 892000, "plays_count": 456000, "likes_count": 34200}),
    ("Living Your Best Life", "Sarah Johnson", "stream", "lifestyle", "video",
     {"photo": 1181406, "duration": "12:45", "rating": 4.6, "views_count": 234000, "plays_count": 123000, "likes_count": 8900}),
    ("Afrobeat Dreams", "Burna Boy", "listen", "Afrobeat", "audio",
     {"photo": 1763075, "duration": "3:45", "rating": 4.9, "plays_count": 567000, "likes_count": 23400}),
    ("Hip Hop Chronicles", "DJ Khaled", "listen", "hip-hop", "audio",
     {"photo": 1449844, "duration": "45:30", "rating": 4.8, "plays_count": 345000, "likes_count": 18900}),
    ("Smooth RnB Vibes", "Alicia Keys", "listen", "RnB", "audio",
     {"photo": 1540406, "duration": "38:22", "rating": 4.7, "is_premium": True, "plays_count": 289000, "likes_count": 15600}),
    ("DJ Summer Mixtape", "DJ Supreme", "listen", "DJ-mixtapes", "audio",
     {"photo": 1047442, "duration": "1:05:45", "rating": 4.8, "plays_count": 445000, "likes_count": 21200}),
    ("Interview with Rising Star", "Music Weekly", "blog", "interviews", "blog",
     {"photo": 1181676, "read_time": "8 min read", "rating": 4.6, "views_count": 45000, "likes_count": 3400}),
    ("Top 10 Lifestyle Trends 2024", "Lifestyle Magazine", "blog", "lifestyle", "blog",
     {"photo": 1181467, "read_time": "6 min read", "rating": 4.5, "views_count": 32000, "likes_count": 2100}),
    ("Modern Minimalist Design", "Jane Cooper", "gallery", "design", "image",
     {"photo": 1571460, "rating": 4.8, "views_count": 23400, "likes_count": 2340}),
    ("Urban Photography Collection", "Michael Chen", "gallery", "photography", "image",
     {"photo": 1486222, "rating": 4.9, "is_premium": True, "views_count": 34500, "likes_count": 4120}),
    ("Web Design Template Pack", "Creative Studio", "resources", "templates", "file",
     {"photo": 196644, "price": 49000, "rating": 4.9, "is_premium": True, "sales_count": 234, "likes_count": 890}),
    ("Digital Marketing eBook", "Marketing Guru", "resources", "ebooks", "file",
     {"photo": 267350, "price": 25000, "rating": 4.7, "sales_count": 678, "likes_count": 567}),
]


def seed_media() -> list[dict[str, Any]]:
    """Sample system content, one projected row per item (newest first)."""
    rows = []
    for title, creator, media_type, category, content_type, extra in _SEED_ROWS:
        extra = dict(extra)
        photo = extra.pop("photo")
        row = {field: None for field in MEDIA_FIELDS}
        row.update(
            id=str(uuid.uuid5(_SEED_NAMESPACE, title)),
            title=title,
            creator_name=creator,
            thumbnail_url=_PEXELS.format(photo),
            type=media_type,
            category=category,
            content_type=content_type,
            rating=0.0,
            is_premium=False,
            views_count=0,
            plays_count=0,
            sales_count=0,
            likes_count=0,
        )
        row.update(extra)
        rows.append(row)
    return rows


class InMemoryMediaRepository:
    """In-memory implementation of ContentStore and InteractionStore.

    Example:
        ```python
        repo = InMemoryMediaRepository.create()
        rows, total = await repo.fetch_page("stream", offset=0, limit=12)

        repo.fail("fetch_liked_media_ids")  # next calls raise
        repo.calls["fetch_page"]            # number of content queries
        ```
    """

    def __init__(
        self,
        media: list[dict[str, Any]] | None = None,
        latency: float = 0.0,
    ) -> None:
        """Initialize the repository.

        Args:
            media: Projected media rows, newest first. Defaults to empty.
            latency: Seconds each call sleeps before answering.
        """
        self._media = [dict(row) for row in media or []]
        self._likes: set[tuple[str, str]] = set()
        self._follows: set[tuple[str, str]] = set()
        self._latency = latency
        self._failing: set[str] = set()
        self.calls: Counter[str] = Counter()

    @classmethod
    def create(cls, latency: float = 0.0) -> "InMemoryMediaRepository":
        """Factory method to create a repository holding the sample content."""
        return cls(media=seed_media(), latency=latency)

    def fail(self, *operations: str) -> None:
        """Make the named operations raise until ``recover`` is called."""
        self._failing.update(operations)

    def recover(self, *operations: str) -> None:
        """Stop failing the named operations (all of them if none given)."""
        if operations:
            self._failing.difference_update(operations)
        else:
            self._failing.clear()

    async def _enter(self, operation: str) -> bool:
        self.calls[operation] += 1
        if self._latency:
            await asyncio.sleep(self._latency)
        return operation in self._failing

    def add_media(self, item: MediaItem | dict[str, Any]) -> None:
        """Insert a row at the head of the listing (newest first)."""
        row = item if isinstance(item, dict) else {f: getattr(item, f) for f in MEDIA_FIELDS}
        self._media.insert(0, dict(row))

    async def fetch_page(
        self,
        media_type: str,
        offset: int,
        limit: int,
        category: str | None = None,
        premium: bool | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        if await self._enter("fetch_page"):
            raise ContentFetchError(media_type, "simulated failure")

        rows = [row for row in self._media if row["type"] == media_type]
        if category:
            rows = [row for row in rows if row["category"] == category]
        if premium is not None:
            rows = [row for row in rows if bool(row["is_premium"]) == premium]

        return [dict(row) for row in rows[offset:offset + limit]], len(rows)

    async def fetch_liked_media_ids(self, user_id: str) -> set[str]:
        if await self._enter("fetch_liked_media_ids"):
            raise InteractionFetchError(user_id, "simulated failure")
        return {media_id for owner, media_id in self._likes if owner == user_id}

    async def fetch_followed_creators(self, user_id: str) -> set[str]:
        if await self._enter("fetch_followed_creators"):
            raise InteractionFetchError(user_id, "simulated failure")
        return {creator for owner, creator in self._follows if owner == user_id}

    def _adjust_likes(self, media_id: str, delta: int) -> None:
        for index, row in enumerate(self._media):
            if row["id"] == media_id:
                self._media[index] = {**row, "likes_count": max(0, row["likes_count"] + delta)}

    async def add_like(self, user_id: str, media_id: str) -> None:
        if await self._enter("add_like"):
            raise InteractionWriteError("like media", "simulated failure")
        if (user_id, media_id) not in self._likes:
            self._likes.add((user_id, media_id))
            self._adjust_likes(media_id, 1)

    async def remove_like(self, user_id: str, media_id: str) -> None:
        if await self._enter("remove_like"):
            raise InteractionWriteError("unlike media", "simulated failure")
        if (user_id, media_id) in self._likes:
            self._likes.discard((user_id, media_id))
            self._adjust_likes(media_id, -1)

    async def add_follow(self, user_id: str, creator_name: str) -> None:
        if await self._enter("add_follow"):
            raise InteractionWriteError("follow creator", "simulated failure")
        self._follows.add((user_id, creator_name))

    async def remove_follow(self, user_id: str, creator_name: str) -> None:
        if await self._enter("remove_follow"):
            raise InteractionWriteError("unfollow creator", "simulated failure")
        self._follows.discard((user_id, creator_name))

    def get_media(self, media_id: str) -> MediaItem | None:
        """Look up a single item by ID."""
        for row in self._media:
            if row["id"] == media_id:
                return MediaItem.from_row(row)
        return None

    @property
    def media(self) -> list[MediaItem]:
        """All items currently stored (for testing)."""
        return [MediaItem.from_row(row) for row in self._media]
