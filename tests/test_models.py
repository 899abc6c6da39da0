import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from loglines.models import LogRecord, to_iso8601


class TestToIso8601:
    def test_utc_with_milliseconds(self):
        dt = datetime(2025, 5, 15, 14, 30, 0, 123456, tzinfo=timezone.utc)
        assert to_iso8601(dt) == "2025-05-15T14:30:00.123Z"

    def test_offset_converted(self):
        dt = datetime(2025, 5, 15, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert to_iso8601(dt) == "2025-05-16T04:30:00.000Z"


class TestLogRecord:
    def test_to_dict_without_timestamp(self):
        record = LogRecord("info", 2, "svc", "msg", {"a": 1})
        assert list(record.to_dict()) == ["level", "level_n", "namespace", "message", "context"]

    def test_to_dict_with_timestamp(self):
        record = LogRecord("info", 2, "svc", "msg", timestamp="2025-05-15T14:30:00.000Z")
        assert record.to_dict()["timestamp"] == "2025-05-15T14:30:00.000Z"
        assert record.to_dict()["context"] == {}

    def test_frozen(self):
        record = LogRecord("info", 2, "svc", "msg")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.message = "changed"
