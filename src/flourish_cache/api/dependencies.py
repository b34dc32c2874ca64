"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Stores can be injected up front (tests, demo); otherwise the
      Supabase repositories are created from settings
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from flourish_cache.config import settings
from flourish_cache.handlers import FeedHandler
from flourish_cache.protocols import ContentStore, InteractionStore
from flourish_cache.query_cache import QueryCache, global_query_cache
from flourish_cache.realtime import ChangeFeed
from flourish_cache.repositories import SupabaseContentRepository, SupabaseInteractionRepository
from flourish_cache.services import FeedService
from flourish_cache.utils.log import configure_logging, get_logger

logger = get_logger(__name__)


def get_feed_service(request: Request) -> FeedService:
    """Dependency injection for FeedService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "feed_service", None)
    if service is None:
        raise RuntimeError("FeedService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> FeedHandler:
    """Dependency injection for FeedHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "feed_handler", None)
    if handler is None:
        raise RuntimeError("FeedHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    content_store: ContentStore | None = None,
    interaction_store: InteractionStore | None = None,
    cache: QueryCache | None = None,
) -> Callable[[FastAPI], AsyncIterator[None]]:
    """Build the lifespan context manager for the FastAPI app.

    Args:
        content_store: Content store to use. Defaults to Supabase.
        interaction_store: Interaction store to use. Defaults to Supabase.
        cache: Query cache to use. Defaults to the process-wide cache.

    Returns:
        Lifespan function suitable for ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        Cleanup:
            Closes owned HTTP clients and removes services from app.state
        """
        configure_logging()

        owned: list[SupabaseContentRepository | SupabaseInteractionRepository] = []
        contents = content_store
        interactions = interaction_store
        if contents is None:
            contents = SupabaseContentRepository.create()
            owned.append(contents)
        if interactions is None:
            interactions = SupabaseInteractionRepository.create()
            owned.append(interactions)

        change_feed = ChangeFeed()
        feed_service = FeedService.create(
            content_store=contents,
            interaction_store=interactions,
            cache=cache if cache is not None else global_query_cache,
            change_feed=change_feed,
        )
        feed_handler = FeedHandler(
            feed_service=feed_service,
            change_feed=change_feed,
            webhook_secret=settings.webhook_secret,
        )

        # Store in app.state (FastAPI pattern)
        app.state.feed_service = feed_service
        app.state.feed_handler = feed_handler
        app.state.change_feed = change_feed

        logger.info(
            "feed.started",
            page_size=feed_service.page_size,
            ttl_seconds=feed_service.cache.default_ttl,
            supabase_url=settings.supabase_url,
        )

        yield

        feed_service.close()
        for repository in owned:
            await repository.close()

        del app.state.feed_handler
        del app.state.feed_service
        del app.state.change_feed
        logger.info("feed.stopped")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[FeedHandler, Depends(get_handler)]
ServiceDep = Annotated[FeedService, Depends(get_feed_service)]
