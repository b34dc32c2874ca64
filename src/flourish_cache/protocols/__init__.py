"""Protocol interfaces for swappable implementations.

Services depend on these structural types, so the PostgREST
repositories and the in-memory store are interchangeable.
"""

from .content_store import ContentStore
from .interaction_store import InteractionStore

__all__ = [
    "ContentStore",
    "InteractionStore",
]
