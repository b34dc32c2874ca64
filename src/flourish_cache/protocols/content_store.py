"""Content store protocol.

Defines the interface for any backend that can serve offset/limit pages
of media content together with an exact total count.

Implementations can include:
- Supabase / PostgREST (default)
- In-memory seeded store (demo, tests)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContentStore(Protocol):
    """Protocol for paginated media content queries."""

    async def fetch_page(
        self,
        media_type: str,
        offset: int,
        limit: int,
        category: str | None = None,
        premium: bool | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of media rows, newest first.

        Args:
            media_type: One of stream, listen, blog, gallery, resources
            offset: Number of rows to skip
            limit: Maximum number of rows to return
            category: Optional equality filter on the category column
            premium: Optional equality filter on the is_premium column

        Returns:
            Tuple of (projected rows, exact total count for the filters)
        """
        ...
