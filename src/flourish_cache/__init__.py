"""FlourishTalents feed cache - paginated media listings over Supabase.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (ContentStore, InteractionStore)
    - repositories: Data access implementations (PostgREST, in-memory)
    - services: Business logic (FeedService, PageController)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from flourish_cache import FeedService, InMemoryMediaRepository

    repo = InMemoryMediaRepository.create()
    feed = FeedService.create(content_store=repo, interaction_store=repo)
    page = await feed.load_page("stream", 1)
    ```

For HTTP API:
    ```python
    from flourish_cache.api.app import app
    ```
"""

from flourish_cache.config import get_http_client, settings
from flourish_cache.entities import MediaCard, MediaItem, MediaPage, UserInteractionState
from flourish_cache.errors import (
    ContentFetchError,
    FetchError,
    FlourishError,
    InteractionFetchError,
    InteractionWriteError,
)
from flourish_cache.protocols import ContentStore, InteractionStore
from flourish_cache.query_cache import QueryCache, create_query_cache, global_query_cache
from flourish_cache.realtime import ChangeEvent, ChangeFeed
from flourish_cache.repositories import (
    InMemoryMediaRepository,
    SupabaseContentRepository,
    SupabaseInteractionRepository,
)
from flourish_cache.services import FeedService, PageController

__all__ = [
    # Configuration
    "settings",
    "get_http_client",
    # Cache
    "QueryCache",
    "create_query_cache",
    "global_query_cache",
    # Protocols (interfaces)
    "ContentStore",
    "InteractionStore",
    # Services (business logic)
    "FeedService",
    "PageController",
    # Realtime
    "ChangeEvent",
    "ChangeFeed",
    # Repositories (data access)
    "InMemoryMediaRepository",
    "SupabaseContentRepository",
    "SupabaseInteractionRepository",
    # Entities (domain models)
    "MediaCard",
    "MediaItem",
    "MediaPage",
    "UserInteractionState",
    # Errors
    "FlourishError",
    "FetchError",
    "ContentFetchError",
    "InteractionFetchError",
    "InteractionWriteError",
]
