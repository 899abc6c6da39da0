"""JSON Schema shape check for decoded log lines."""

from collections import Counter
from dataclasses import dataclass, field

import jsonschema

# Only the five fields every emitted record carries; anything else (such as
# timestamp) is allowed and ignored.
LOG_RECORD_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "LogRecord",
    "type": "object",
    "required": ["level", "level_n", "namespace", "message", "context"],
    "properties": {
        "level": {"type": "string"},
        "level_n": {"type": "number"},
        "namespace": {"type": "string"},
        "message": {"type": "string"},
        "context": {"type": "object"},
    },
}


@dataclass
class ShapeStats:
    checked: int = 0
    records: int = 0
    rejected: int = 0
    failed_checks: Counter = field(default_factory=Counter)


class RecordValidator:
    """Checks decoded JSON values against the log record shape."""

    def __init__(self, schema=None):
        self._validator = jsonschema.Draft202012Validator(schema or LOG_RECORD_SCHEMA)
        self._stats = ShapeStats()

    def validate(self, obj):
        """Check one decoded value.

        Returns:
            tuple: (is_record: bool, errors: list[str])
        """
        self._stats.checked += 1
        errors = list(self._validator.iter_errors(obj))

        if not errors:
            self._stats.records += 1
            return True, []

        self._stats.rejected += 1
        for error in errors:
            self._stats.failed_checks[error.validator] += 1
        return False, [error.message for error in errors]

    def count_unparsed(self):
        """Record a line that was not JSON at all."""
        self._stats.checked += 1
        self._stats.rejected += 1
        self._stats.failed_checks["json"] += 1

    def get_stats(self) -> dict:
        return {
            "checked": self._stats.checked,
            "records": self._stats.records,
            "rejected": self._stats.rejected,
            "failed_checks": dict(self._stats.failed_checks),
        }

    def reset_stats(self):
        self._stats = ShapeStats()


_shape_validator = jsonschema.Draft202012Validator(LOG_RECORD_SCHEMA)


def is_log_record(obj) -> bool:
    """True if obj has the five required record fields with the right types."""
    return _shape_validator.is_valid(obj)
