"""
Tests for structured JSON logging.
"""

import json
import logging

from flourish_cache.utils.log import JsonFormatter, get_logger


def test_get_logger_is_namespaced():
    assert get_logger("feed").logger.name == "flourish_cache.feed"
    assert get_logger("flourish_cache.realtime").logger.name == "flourish_cache.realtime"


def test_json_formatter_merges_fields():
    record = logging.LogRecord("flourish_cache.feed", logging.INFO, __file__, 1, "feed.cache_miss", None, None)
    record.fields = {"key": "stream:page1"}

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "flourish_cache.feed"
    assert data["message"] == "feed.cache_miss"
    assert data["key"] == "stream:page1"
    assert "timestamp" in data


def test_structured_logger_passes_fields(caplog):
    logger = get_logger("tests")

    with caplog.at_level(logging.INFO, logger="flourish_cache.tests"):
        logger.info("feed.pages_invalidated", media_type="stream", entries=2)

    record = caplog.records[-1]
    assert record.getMessage() == "feed.pages_invalidated"
    assert record.fields == {"media_type": "stream", "entries": 2}
