"""Repository layer for data access.

This layer hides the hosted database behind the protocol interfaces in
``flourish_cache.protocols``:
- Supabase / PostgREST over httpx (production)
- In-memory store seeded with sample content (demo, tests)
"""

from flourish_cache.protocols import ContentStore, InteractionStore

from .memory_repository import InMemoryMediaRepository, seed_media
from .supabase_repository import (
    SupabaseContentRepository,
    SupabaseInteractionRepository,
    parse_content_range,
)

__all__ = [
    "ContentStore",
    "InteractionStore",
    "InMemoryMediaRepository",
    "SupabaseContentRepository",
    "SupabaseInteractionRepository",
    "parse_content_range",
    "seed_media",
]
