"""
Unit tests for logging helpers.
"""

import json
import logging

from maintlog.core.logging_config import JSONFormatter, filter_sensitive_data, truncate_large_data


class TestFilterSensitiveData:
    """Tests for filter_sensitive_data."""

    def test_nested_values_are_masked(self):
        data = {
            "content": "Pump leaks",
            "auth": {"token": "abc", "password": "secret"},
            "items": [{"api_key": "k"}],
        }

        filtered = filter_sensitive_data(data)

        assert filtered["content"] == "Pump leaks"
        assert filtered["auth"]["token"] != "abc"
        assert filtered["auth"]["password"] != "secret"
        assert filtered["items"][0]["api_key"] != "k"
        assert data["auth"]["token"] == "abc"


class TestTruncateLargeData:
    """Tests for truncate_large_data."""

    def test_short_strings_are_unchanged(self):
        assert truncate_large_data("short") == "short"

    def test_long_strings_are_truncated(self):
        result = truncate_large_data("x" * 100, max_length=10)
        assert result.startswith("x" * 10)
        assert len(result) < 100


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_extra_fields_are_merged(self):
        record = logging.LogRecord("maintlog.test", logging.INFO, __file__, 1, "turn done", None, None)
        record.extra_fields = {"session_id": "s1", "duration_ms": 12.5}

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "turn done"
        assert payload["session_id"] == "s1"
        assert payload["duration_ms"] == 12.5
