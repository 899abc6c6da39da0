"""Log record model and timestamp helpers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def to_iso8601(dt: datetime) -> str:
    """Render a datetime as ISO-8601 with millisecond precision.

    Aware values are converted to UTC and get a 'Z' suffix, e.g.
    '2025-05-15T14:30:00.123Z'. Naive values are rendered as-is.
    """
    if dt.tzinfo is None:
        return dt.isoformat(timespec="milliseconds")
    utc = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return utc.isoformat(timespec="milliseconds") + "Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogRecord:
    level: str
    level_n: int
    namespace: str
    message: str
    context: dict = field(default_factory=dict)
    timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        """Wire-order mapping; timestamp is left out entirely when unset."""
        data = {"level": self.level, "level_n": self.level_n}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        data["namespace"] = self.namespace
        data["message"] = self.message
        data["context"] = self.context
        return data
