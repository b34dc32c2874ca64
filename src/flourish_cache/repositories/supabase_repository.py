"""Supabase (PostgREST) implementations of the store protocols.

Talks to the ``/rest/v1`` endpoint over ``httpx.AsyncClient``. Only the
display projection of ``media_content`` is ever selected.

PostgREST conventions used here:
- Filters are query parameters of the form ``column=eq.value``
- ``Prefer: count=exact`` returns the total in ``Content-Range: 0-11/57``
- ``Prefer: return=minimal`` suppresses response bodies on writes
"""

from typing import Any

import httpx

from flourish_cache.config import get_http_client
from flourish_cache.entities import MEDIA_FIELDS
from flourish_cache.errors import ContentFetchError, InteractionFetchError, InteractionWriteError
from flourish_cache.utils.log import get_logger

logger = get_logger(__name__)


def parse_content_range(header: str | None) -> int | None:
    """Extract the total from a ``Content-Range`` header.

    Returns:
        The total row count, or None if the header carries none ("0-11/*")
    """
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


class _PostgrestRepository:
    """Shared lazy client handling for the PostgREST repositories."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = get_http_client()
        return self._client

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class SupabaseContentRepository(_PostgrestRepository):
    """PostgREST implementation of the ContentStore protocol.

    Example:
        ```python
        repo = SupabaseContentRepository.create()
        rows, total = await repo.fetch_page("stream", offset=0, limit=12)
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        table: str = "media_content",
    ) -> None:
        """Initialize the content repository.

        Args:
            client: HTTP client bound to the PostgREST base URL. If None,
                creates one from settings on first use.
            table: Name of the media content table.
        """
        super().__init__(client)
        self._table = table

    @classmethod
    def create(cls, client: httpx.AsyncClient | None = None) -> "SupabaseContentRepository":
        """Factory method to create SupabaseContentRepository with defaults."""
        return cls(client=client)

    async def fetch_page(
        self,
        media_type: str,
        offset: int,
        limit: int,
        category: str | None = None,
        premium: bool | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of media rows with an exact total count.

        Raises:
            ContentFetchError: If the request fails or returns an error status
        """
        params = {
            "select": ",".join(MEDIA_FIELDS),
            "type": f"eq.{media_type}",
            "order": "created_at.desc",
            "offset": str(offset),
            "limit": str(limit),
        }
        if category:
            params["category"] = f"eq.{category}"
        if premium is not None:
            params["is_premium"] = f"eq.{str(premium).lower()}"

        try:
            response = await self.client.get(
                self._table,
                params=params,
                headers={"Prefer": "count=exact"},
            )
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPError as e:
            logger.error("content.fetch_failed", media_type=media_type, offset=offset, error=str(e))
            raise ContentFetchError(media_type, str(e)) from e

        total = parse_content_range(response.headers.get("content-range"))
        if total is None:
            total = offset + len(rows)

        return rows, total


class SupabaseInteractionRepository(_PostgrestRepository):
    """PostgREST implementation of the InteractionStore protocol."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        likes_table: str = "media_likes",
        follows_table: str = "creator_follows",
    ) -> None:
        """Initialize the interaction repository.

        Args:
            client: HTTP client bound to the PostgREST base URL.
            likes_table: Table of (user_id, media_id) pairs.
            follows_table: Table of (follower_id, creator_name) pairs.
        """
        super().__init__(client)
        self._likes_table = likes_table
        self._follows_table = follows_table

    @classmethod
    def create(cls, client: httpx.AsyncClient | None = None) -> "SupabaseInteractionRepository":
        """Factory method to create SupabaseInteractionRepository with defaults."""
        return cls(client=client)

    async def _select_column(self, table: str, column: str, owner_column: str, user_id: str) -> set[str]:
        try:
            response = await self.client.get(
                table,
                params={"select": column, owner_column: f"eq.{user_id}"},
            )
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPError as e:
            logger.error("interactions.fetch_failed", table=table, user_id=user_id, error=str(e))
            raise InteractionFetchError(user_id, str(e)) from e

        return {str(row[column]) for row in rows}

    async def fetch_liked_media_ids(self, user_id: str) -> set[str]:
        return await self._select_column(self._likes_table, "media_id", "user_id", user_id)

    async def fetch_followed_creators(self, user_id: str) -> set[str]:
        return await self._select_column(self._follows_table, "creator_name", "follower_id", user_id)

    async def _insert(self, table: str, row: dict[str, str], action: str) -> None:
        try:
            response = await self.client.post(
                table,
                json=row,
                headers={"Prefer": "return=minimal"},
            )
            # Unique (owner, target) constraint: the row is already there
            if response.status_code == httpx.codes.CONFLICT:
                return
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("interactions.write_failed", table=table, action=action, error=str(e))
            raise InteractionWriteError(action, str(e)) from e

    async def _remove(self, table: str, filters: dict[str, str], action: str) -> None:
        try:
            response = await self.client.delete(
                table,
                params={column: f"eq.{value}" for column, value in filters.items()},
                headers={"Prefer": "return=minimal"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("interactions.write_failed", table=table, action=action, error=str(e))
            raise InteractionWriteError(action, str(e)) from e

    async def add_like(self, user_id: str, media_id: str) -> None:
        await self._insert(self._likes_table, {"user_id": user_id, "media_id": media_id}, "like media")

    async def remove_like(self, user_id: str, media_id: str) -> None:
        await self._remove(self._likes_table, {"user_id": user_id, "media_id": media_id}, "unlike media")

    async def add_follow(self, user_id: str, creator_name: str) -> None:
        await self._insert(
            self._follows_table,
            {"follower_id": user_id, "creator_name": creator_name},
            "follow creator",
        )

    async def remove_follow(self, user_id: str, creator_name: str) -> None:
        await self._remove(
            self._follows_table,
            {"follower_id": user_id, "creator_name": creator_name},
            "unfollow creator",
        )
