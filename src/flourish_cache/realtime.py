"""Change notifications for the interaction tables.

Events are hints that "something changed"; they carry no authoritative
state and have no ordering guarantee relative to the write behind them.
Supabase database webhooks are parsed into ``ChangeEvent`` and fanned
out to subscribers through ``ChangeFeed``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from flourish_cache.utils.log import get_logger

logger = get_logger(__name__)

INTERACTION_TABLES = frozenset({"media_likes", "creator_follows"})


@dataclass(frozen=True)
class ChangeEvent:
    """A row change on a watched table.

    Attributes:
        table: Table name, e.g. "media_likes"
        kind: INSERT, UPDATE or DELETE
        record: New row, if the notifier sent one
        old_record: Previous row, if the notifier sent one
    """

    table: str
    kind: str = "UPDATE"
    record: dict[str, Any] | None = None
    old_record: dict[str, Any] | None = None

    @classmethod
    def from_webhook(cls, payload: dict[str, Any]) -> "ChangeEvent":
        """Parse a Supabase database-webhook payload.

        Raises:
            ValueError: If the payload names no table
        """
        table = payload.get("table")
        if not table:
            raise ValueError("Webhook payload has no 'table'")

        return cls(
            table=table,
            kind=str(payload.get("type", "UPDATE")).upper(),
            record=payload.get("record"),
            old_record=payload.get("old_record"),
        )

    @property
    def is_interaction_change(self) -> bool:
        return self.table in INTERACTION_TABLES

    @property
    def user_id(self) -> str | None:
        """Owning user of the changed row, when the payload includes it."""
        for row in (self.record, self.old_record):
            if row:
                owner = row.get("user_id") or row.get("follower_id")
                if owner:
                    return str(owner)
        return None


ChangeCallback = Callable[[ChangeEvent], None]


class ChangeFeed:
    """In-process publish/subscribe channel for change events."""

    def __init__(self) -> None:
        self._subscribers: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every subscriber.

        Returns:
            Number of subscribers notified
        """
        logger.debug("realtime.publish", table=event.table, kind=event.kind)
        subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(event)
        return len(subscribers)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
