"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """A single slot of the query cache.

    Attributes:
        data: The cached value (None for negative entries)
        timestamp: Clock reading when the entry was written
        error: The cached failure for negative entries
        expires_at: Clock reading after which the entry is physically
            removed, or None for entries without scheduled removal
    """

    data: Any
    timestamp: float
    error: BaseException | None = None
    expires_at: float | None = None

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was written."""
        return now - self.timestamp

    def is_expired(self, now: float) -> bool:
        """Whether the scheduled removal deadline has passed (strictly)."""
        return self.expires_at is not None and now > self.expires_at
