"""Domain entities for internal representation.

These are pure dataclasses used internally by services and
repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .interaction_state import UserInteractionState
from .media_item import MEDIA_FIELDS, MEDIA_TYPES, MediaItem
from .media_page import ContentPage, MediaCard, MediaPage

__all__ = [
    "CacheEntry",
    "ContentPage",
    "MEDIA_FIELDS",
    "MEDIA_TYPES",
    "MediaCard",
    "MediaItem",
    "MediaPage",
    "UserInteractionState",
]
