"""Feed service: paginated media merged with per-user interaction state.

Caching policy:
- Content pages are keyed by listing and page number (``stream:page1``).
  Only unauthenticated loads write them; every load reads them.
- Interaction state is keyed by user (``interactions:<user_id>``).
  Authenticated page loads always re-fetch it, the two queries running
  concurrently, and refresh the cached copy used by the toggles.
- A change on the likes/follows tables drops the interaction state of
  every user this service has cached; content pages are left alone.
  A fetch already in flight when an invalidation happens still answers
  its caller but does not write its snapshot to the cache.
"""

import asyncio

from flourish_cache.config import settings
from flourish_cache.entities import (
    MEDIA_TYPES,
    ContentPage,
    MediaCard,
    MediaItem,
    MediaPage,
    UserInteractionState,
)
from flourish_cache.errors import ContentFetchError, FlourishError, InteractionFetchError
from flourish_cache.protocols import ContentStore, InteractionStore
from flourish_cache.query_cache import QueryCache, global_query_cache
from flourish_cache.realtime import ChangeEvent, ChangeFeed
from flourish_cache.utils.log import get_logger

logger = get_logger(__name__)


class FeedService:
    """Core page-loading orchestration service.

    Depends on PROTOCOLS, not concrete implementations:
    - ContentStore: Supabase/PostgREST, in-memory, ...
    - InteractionStore: same

    Example:
        ```python
        repo = InMemoryMediaRepository.create()
        feed = FeedService.create(content_store=repo, interaction_store=repo)

        page = await feed.load_page("stream", 1)
        page = await feed.load_page("stream", 1, user_id="u1")
        ```
    """

    def __init__(
        self,
        content_store: ContentStore,
        interaction_store: InteractionStore,
        cache: QueryCache | None = None,
        page_size: int | None = None,
        change_feed: ChangeFeed | None = None,
    ) -> None:
        """Initialize the feed service.

        Args:
            content_store: Source of paginated media rows (required).
            interaction_store: Source of likes and follows (required).
            cache: Query cache to use. Defaults to the process-wide cache.
            page_size: Items per page. Defaults to settings.
            change_feed: Optional feed whose events invalidate interaction state.
        """
        self._content = content_store
        self._interactions = interaction_store
        self._cache = cache if cache is not None else global_query_cache
        if page_size is None:
            page_size = settings.page_size
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._page_size = page_size
        self._known_users: set[str] = set()
        # Bumped on every invalidation; fetches that straddle one are not cached
        self._invalidations = 0
        self._unsubscribe = change_feed.subscribe(self.handle_change) if change_feed else None

    @classmethod
    def create(
        cls,
        content_store: ContentStore,
        interaction_store: InteractionStore,
        cache: QueryCache | None = None,
        page_size: int | None = None,
        change_feed: ChangeFeed | None = None,
    ) -> "FeedService":
        """Factory method to create FeedService with settings defaults."""
        return cls(
            content_store=content_store,
            interaction_store=interaction_store,
            cache=cache,
            page_size=page_size,
            change_feed=change_feed,
        )

    @staticmethod
    def page_key(
        media_type: str,
        page: int,
        category: str | None = None,
        premium: bool | None = None,
    ) -> str:
        """Cache key of one content page, e.g. ``stream:page1``."""
        parts = [media_type]
        if category:
            parts.append(category)
        if premium is not None:
            parts.append("premium" if premium else "free")
        parts.append(f"page{page}")
        return ":".join(parts)

    @staticmethod
    def interaction_key(user_id: str) -> str:
        """Cache key of one user's interaction state."""
        return f"interactions:{user_id}"

    def page_offset(self, page: int) -> int:
        """Row offset of a 1-based page number."""
        return (page - 1) * self._page_size

    async def load_page(
        self,
        media_type: str,
        page: int = 1,
        user_id: str | None = None,
        category: str | None = None,
        premium: bool | None = None,
    ) -> MediaPage:
        """Load one page of content merged with the viewer's likes and follows.

        Args:
            media_type: One of stream, listen, blog, gallery, resources
            page: 1-based page number
            user_id: Viewer, or None for an unauthenticated request
            category: Optional category filter ("all" means none)
            premium: Optional premium filter

        Returns:
            MediaPage with per-item is_liked / is_followed flags

        Raises:
            ValueError: On an unknown media type or a page below 1
            ContentFetchError: If the content query fails
            InteractionFetchError: If either interaction query fails
        """
        if media_type not in MEDIA_TYPES:
            raise ValueError(f"media_type must be one of {MEDIA_TYPES}, got '{media_type}'")
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if category == "all":
            category = None

        key = self.page_key(media_type, page, category, premium)
        content: ContentPage | None = self._cache.get(key)
        from_cache = content is not None

        if content is None:
            logger.debug("feed.cache_miss", key=key)
            content = await self._fetch_content(media_type, page, category, premium)
            if user_id is None:
                self._cache.set(key, content)
        else:
            logger.debug("feed.cache_hit", key=key)

        state = await self._fetch_interactions(user_id) if user_id is not None else None

        return MediaPage(
            media_type=media_type,
            page=page,
            page_size=self._page_size,
            total_count=content.total_count,
            items=self._merge(content.items, state),
            category=category,
            from_cache=from_cache,
        )

    async def _fetch_content(
        self,
        media_type: str,
        page: int,
        category: str | None,
        premium: bool | None,
    ) -> ContentPage:
        try:
            rows, total = await self._content.fetch_page(
                media_type,
                offset=self.page_offset(page),
                limit=self._page_size,
                category=category,
                premium=premium,
            )
        except FlourishError:
            raise
        except Exception as e:
            raise ContentFetchError(media_type, str(e)) from e

        return ContentPage(
            items=tuple(MediaItem.from_row(row) for row in rows),
            total_count=total,
        )

    async def _fetch_interactions(self, user_id: str) -> UserInteractionState:
        generation = self._invalidations
        try:
            liked, followed = await asyncio.gather(
                self._interactions.fetch_liked_media_ids(user_id),
                self._interactions.fetch_followed_creators(user_id),
            )
        except FlourishError:
            raise
        except Exception as e:
            raise InteractionFetchError(user_id, str(e)) from e

        state = UserInteractionState(
            user_id=user_id,
            liked_media_ids=frozenset(liked),
            followed_creators=frozenset(followed),
        )
        if generation != self._invalidations:
            logger.info("feed.stale_interactions_discarded", user_id=user_id)
            return state

        self._cache.set(self.interaction_key(user_id), state)
        self._known_users.add(user_id)
        return state

    @staticmethod
    def _merge(
        items: tuple[MediaItem, ...],
        state: UserInteractionState | None,
    ) -> list[MediaCard]:
        if state is None:
            return [MediaCard(item=item) for item in items]

        return [
            MediaCard(
                item=item,
                is_liked=state.has_liked(item.id),
                is_followed=state.is_following(item.creator_name),
            )
            for item in items
        ]

    async def get_interaction_state(self, user_id: str) -> UserInteractionState:
        """Return the user's likes and follows, from cache when fresh."""
        cached: UserInteractionState | None = self._cache.get(self.interaction_key(user_id))
        if cached is not None:
            return cached
        self._known_users.discard(user_id)
        return await self._fetch_interactions(user_id)

    def handle_change(self, event: ChangeEvent) -> int:
        """Invalidate interaction state after a likes/follows change.

        Args:
            event: The change notification (a hint only)

        Returns:
            Number of users whose cached state was dropped
        """
        if not event.is_interaction_change:
            return 0

        self._invalidations += 1
        self._prune_known_users()
        users = list(self._known_users)
        for user_id in users:
            self._cache.delete(self.interaction_key(user_id))
        self._known_users.clear()

        logger.info("feed.interactions_invalidated", table=event.table, kind=event.kind, users=len(users))
        return len(users)

    def invalidate_user(self, user_id: str) -> None:
        """Drop one user's cached interaction state."""
        self._invalidations += 1
        self._cache.delete(self.interaction_key(user_id))
        self._known_users.discard(user_id)

    def invalidate_pages(self, media_type: str) -> int:
        """Drop every cached page of a media type.

        Returns:
            Number of cache entries removed
        """
        count = self._cache.delete_prefix(f"{media_type}:")
        logger.info("feed.pages_invalidated", media_type=media_type, entries=count)
        return count

    async def like(self, user_id: str, media_id: str) -> None:
        await self._interactions.add_like(user_id, media_id)
        self.invalidate_user(user_id)

    async def unlike(self, user_id: str, media_id: str) -> None:
        await self._interactions.remove_like(user_id, media_id)
        self.invalidate_user(user_id)

    async def follow(self, user_id: str, creator_name: str) -> None:
        await self._interactions.add_follow(user_id, creator_name)
        self.invalidate_user(user_id)

    async def unfollow(self, user_id: str, creator_name: str) -> None:
        await self._interactions.remove_follow(user_id, creator_name)
        self.invalidate_user(user_id)

    async def toggle_like(self, user_id: str, media_id: str) -> bool:
        """Like or unlike depending on the current state.

        Returns:
            True if the media is liked afterwards
        """
        state = await self.get_interaction_state(user_id)
        if state.has_liked(media_id):
            await self.unlike(user_id, media_id)
            return False
        await self.like(user_id, media_id)
        return True

    async def toggle_follow(self, user_id: str, creator_name: str) -> bool:
        """Follow or unfollow depending on the current state.

        Returns:
            True if the creator is followed afterwards
        """
        state = await self.get_interaction_state(user_id)
        if state.is_following(creator_name):
            await self.unfollow(user_id, creator_name)
            return False
        await self.follow(user_id, creator_name)
        return True

    def _prune_known_users(self) -> None:
        # Users whose interaction entry aged out of the cache
        expired = [
            user_id for user_id in self._known_users if self._cache.get(self.interaction_key(user_id)) is None
        ]
        self._known_users.difference_update(expired)

    def get_stats(self) -> dict:
        """Get cache statistics."""
        self._prune_known_users()
        return {
            "total_entries": self._cache.get_size(),
            "ttl_seconds": self._cache.default_ttl,
            "page_size": self._page_size,
            "known_users": len(self._known_users),
        }

    def clear(self) -> None:
        """Empty the cache and forget all known users."""
        self._invalidations += 1
        self._cache.clear()
        self._known_users.clear()

    def close(self) -> None:
        """Stop listening to the change feed."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def page_size(self) -> int:
        """Get the number of items per page."""
        return self._page_size

    @property
    def cache(self) -> QueryCache:
        """Get the underlying cache (for testing)."""
        return self._cache
