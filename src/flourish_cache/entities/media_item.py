"""Media item domain entity."""

from dataclasses import dataclass
from typing import Any

MEDIA_TYPES = ("stream", "listen", "blog", "gallery", "resources")

# Display projection of a media_content row, in select order.
MEDIA_FIELDS = (
    "id",
    "title",
    "creator_name",
    "description",
    "thumbnail_url",
    "duration",
    "read_time",
    "type",
    "category",
    "content_type",
    "price",
    "rating",
    "is_premium",
    "views_count",
    "plays_count",
    "sales_count",
    "likes_count",
)


def _to_float(value: Any) -> float | None:
    # PostgREST returns numeric columns either as numbers or as strings
    if value is None:
        return None
    return float(value)


@dataclass(frozen=True)
class MediaItem:
    """Domain entity for one piece of media content.

    Counters are maintained by database triggers; this package only
    ever reads them.
    """

    id: str
    title: str
    creator_name: str
    thumbnail_url: str
    type: str
    category: str
    content_type: str
    description: str | None = None
    duration: str | None = None
    read_time: str | None = None
    price: float | None = None
    rating: float = 0.0
    is_premium: bool = False
    views_count: int = 0
    plays_count: int = 0
    sales_count: int = 0
    likes_count: int = 0

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MediaItem":
        """Build an item from a projected ``media_content`` row."""
        return cls(
            id=str(row["id"]),
            title=row["title"],
            creator_name=row["creator_name"],
            thumbnail_url=row.get("thumbnail_url") or "",
            type=row["type"],
            category=row.get("category") or "all",
            content_type=row["content_type"],
            description=row.get("description"),
            duration=row.get("duration"),
            read_time=row.get("read_time"),
            price=_to_float(row.get("price")),
            rating=_to_float(row.get("rating")) or 0.0,
            is_premium=bool(row.get("is_premium", False)),
            views_count=int(row.get("views_count") or 0),
            plays_count=int(row.get("plays_count") or 0),
            sales_count=int(row.get("sales_count") or 0),
            likes_count=int(row.get("likes_count") or 0),
        )
