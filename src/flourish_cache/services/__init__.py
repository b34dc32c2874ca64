"""Service layer for business logic.

This layer contains the core orchestration. Services depend on
protocols (interfaces), not concrete implementations, making them
testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from flourish_cache.services import FeedService, PageController

    feed = FeedService.create(content_store=repo, interaction_store=repo)
    controller = PageController(feed, "stream")
    ```
"""

from .feed_service import FeedService
from .page_controller import PageController

__all__ = [
    "FeedService",
    "PageController",
]
