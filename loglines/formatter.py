"""Default log formatter: single-line JSON with a per-field value hook."""

import json
import math
import re
from typing import Any, Callable

from loglines.models import LogRecord

JsonValueSerializer = Callable[[str, Any], Any]

# Lone surrogates (from surrogateescape'd paths and env vars) can't be
# written as UTF-8; they go out as \uXXXX escapes instead.
_SURROGATE = re.compile("[\ud800-\udfff]")


def _escape_surrogate(match: re.Match) -> str:
    return f"\\u{ord(match.group()):04x}"


def _walk(key: str, value, serializer: JsonValueSerializer, path: set):
    # Track the value as given, not the serializer's result: converted
    # mappings and dataclasses come back as a fresh dict on every visit.
    marker = id(value)
    if marker in path:
        raise ValueError("Circular reference detected")
    path.add(marker)
    try:
        value = serializer(key, value)

        if isinstance(value, float) and not math.isfinite(value):
            return None
        if isinstance(value, dict):
            return {k: _walk(str(k), item, serializer, path) for k, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [_walk(str(i), item, serializer, path) for i, item in enumerate(value)]
        return value
    finally:
        path.discard(marker)


def encode_json(value, json_value_serializer: JsonValueSerializer) -> str:
    """Encode value as compact JSON, passing every field through the serializer.

    The serializer sees the root first (key ""), then each dict item and list
    element, and the walk continues into whatever dicts or lists it returns.
    """
    walked = _walk("", value, json_value_serializer, set())
    text = json.dumps(walked, separators=(",", ":"), ensure_ascii=False)
    return _SURROGATE.sub(_escape_surrogate, text)


def format_log(record: LogRecord, json_value_serializer: JsonValueSerializer) -> str:
    """Default format_log: the record's wire-order dict as one JSON line."""
    return encode_json(record.to_dict(), json_value_serializer)
