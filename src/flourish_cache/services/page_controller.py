"""Page-level controller for one media listing.

Tracks which page the viewer asked for last. Every request bumps a
generation number; a response that arrives after a newer request was
issued is dropped instead of replacing what is on screen.
"""

from flourish_cache.entities import MediaPage
from flourish_cache.errors import FetchError
from flourish_cache.utils.log import get_logger

from .feed_service import FeedService

logger = get_logger(__name__)


class PageController:
    """Drives page navigation for a single listing.

    Example:
        ```python
        controller = PageController(feed, "stream", user_id="u1")
        await controller.show(1)
        await controller.next_page()
        ```
    """

    def __init__(
        self,
        feed: FeedService,
        media_type: str,
        user_id: str | None = None,
        category: str | None = None,
        premium: bool | None = None,
    ) -> None:
        self._feed = feed
        self.media_type = media_type
        self.user_id = user_id
        self.category = category
        self.premium = premium

        self.current: MediaPage | None = None
        self.error: FetchError | None = None
        self.requested_page: int | None = None
        self.generation = 0

    async def show(self, page: int) -> MediaPage | None:
        """Load ``page`` and make it current.

        Returns:
            The loaded page, or None if a newer request superseded this one

        Raises:
            FetchError: If the load failed and is still the latest request;
                ``current`` keeps the previously shown page
        """
        self.generation += 1
        generation = self.generation
        self.requested_page = page

        try:
            result = await self._feed.load_page(
                self.media_type,
                page,
                user_id=self.user_id,
                category=self.category,
                premium=self.premium,
            )
        except FetchError as e:
            if generation != self.generation:
                logger.info("page.stale_failure_discarded", media_type=self.media_type, page=page)
                return None
            self.error = e
            raise

        if generation != self.generation:
            logger.info("page.stale_response_discarded", media_type=self.media_type, page=page)
            return None

        self.current = result
        self.error = None
        return result

    async def retry(self) -> MediaPage | None:
        """Re-issue the most recently requested page."""
        return await self.show(self.requested_page or 1)

    async def next_page(self) -> MediaPage | None:
        if self.current is None:
            return await self.show(1)
        return await self.show(self.current.page + 1)

    async def previous_page(self) -> MediaPage | None:
        if self.current is None or self.current.page <= 1:
            return await self.show(1)
        return await self.show(self.current.page - 1)
