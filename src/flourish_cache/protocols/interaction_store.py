"""Interaction store protocol.

Likes are ``(user_id, media_id)`` pairs, follows are
``(follower_id, creator_name)`` pairs. Uniqueness and counter updates
belong to the database.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class InteractionStore(Protocol):
    """Protocol for reading and writing a user's likes and follows."""

    async def fetch_liked_media_ids(self, user_id: str) -> set[str]:
        """Return the IDs of all media liked by ``user_id``."""
        ...

    async def fetch_followed_creators(self, user_id: str) -> set[str]:
        """Return the names of all creators followed by ``user_id``."""
        ...

    async def add_like(self, user_id: str, media_id: str) -> None:
        """Record a like; liking twice is not an error."""
        ...

    async def remove_like(self, user_id: str, media_id: str) -> None:
        """Remove a like; no-op if absent."""
        ...

    async def add_follow(self, user_id: str, creator_name: str) -> None:
        """Record a follow; following twice is not an error."""
        ...

    async def remove_follow(self, user_id: str, creator_name: str) -> None:
        """Remove a follow; no-op if absent."""
        ...
