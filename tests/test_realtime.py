"""
Tests for change events and the in-process change feed.
"""

import pytest

from flourish_cache.realtime import ChangeEvent, ChangeFeed


def test_from_webhook():
    event = ChangeEvent.from_webhook(
        {
            "type": "insert",
            "table": "media_likes",
            "schema": "public",
            "record": {"user_id": "u1", "media_id": "m1"},
            "old_record": None,
        }
    )

    assert event.table == "media_likes"
    assert event.kind == "INSERT"
    assert event.is_interaction_change is True
    assert event.user_id == "u1"


def test_from_webhook_requires_table():
    with pytest.raises(ValueError):
        ChangeEvent.from_webhook({"type": "DELETE"})


def test_user_id_from_old_record():
    event = ChangeEvent(
        table="creator_follows",
        kind="DELETE",
        old_record={"follower_id": "u7", "creator_name": "Sia"},
    )
    assert event.user_id == "u7"


def test_non_interaction_table():
    event = ChangeEvent(table="media_content")
    assert event.is_interaction_change is False
    assert event.user_id is None


def test_publish_reaches_subscribers():
    feed = ChangeFeed()
    received = []
    feed.subscribe(received.append)
    feed.subscribe(received.append)

    event = ChangeEvent(table="media_likes")
    assert feed.publish(event) == 2
    assert received == [event, event]


def test_unsubscribe():
    feed = ChangeFeed()
    received = []
    unsubscribe = feed.subscribe(received.append)

    unsubscribe()
    unsubscribe()

    assert feed.publish(ChangeEvent(table="media_likes")) == 0
    assert feed.subscriber_count == 0
    assert received == []
