import io
import json
from datetime import datetime, timezone

import pytest

from loglines.emitter import Emitter, EmitterConfig
from loglines.output import LineWriter

FIXED_TIME = datetime(2025, 5, 15, 14, 30, 0, 123456, tzinfo=timezone.utc)


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def make_emitter(stream):
    """Build an Emitter writing to the in-memory stream with a fixed clock."""

    def _make(**config):
        return Emitter(
            EmitterConfig(**config),
            writer=LineWriter(stream),
            clock=lambda: FIXED_TIME,
        )

    return _make


@pytest.fixture
def written_lines(stream):
    """Lines written so far to the in-memory stream."""

    def _lines():
        return stream.getvalue().splitlines()

    return _lines


@pytest.fixture
def written_records(written_lines):
    """Written lines decoded as JSON."""

    def _records():
        return [json.loads(line) for line in written_lines()]

    return _records


@pytest.fixture
def sample_record():
    return {
        "level": "error",
        "level_n": 4,
        "namespace": "my-app.db",
        "message": "Could not connect",
        "context": {"retries": 3},
    }
