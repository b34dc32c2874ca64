"""Page of media merged with interaction flags."""

import math
from dataclasses import dataclass, field

from .media_item import MediaItem


@dataclass(frozen=True)
class MediaCard:
    """A media item as shown to one viewer."""

    item: MediaItem
    is_liked: bool = False
    is_followed: bool = False


@dataclass(frozen=True)
class ContentPage:
    """Raw page of content as fetched from the content store.

    This is what the page cache holds; it carries no per-user data.
    """

    items: tuple[MediaItem, ...]
    total_count: int


@dataclass(frozen=True)
class MediaPage:
    """One offset-addressed slice of a media listing."""

    media_type: str
    page: int
    page_size: int
    total_count: int
    items: list[MediaCard] = field(default_factory=list)
    category: str | None = None
    from_cache: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
