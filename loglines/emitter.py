"""Structured log emitter — level gating plus one JSON line per call."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from loglines.formatter import JsonValueSerializer, format_log
from loglines.levels import DEFAULT_MIN_LEVEL, LOG_LEVELS, enabled_levels, is_level, rank
from loglines.models import LogRecord, to_iso8601, utc_now
from loglines.normalizer import normalize_value
from loglines.output import LineWriter

LogFormatter = Callable[[LogRecord, JsonValueSerializer], str]


@dataclass(frozen=True)
class EmitterConfig:
    """Emitter settings, fixed once the Emitter is built.

    min_level: lowest level written. An unknown name enables every level.
    include_timestamp: add an ISO-8601 'timestamp' field to each record.
    format_log: turns a record into the output line; receives the
        json_value_serializer so it can use or ignore it.
    json_value_serializer: per-field hook applied while encoding.
    """

    min_level: str = DEFAULT_MIN_LEVEL
    include_timestamp: bool = True
    format_log: LogFormatter = format_log
    json_value_serializer: JsonValueSerializer = normalize_value


class Emitter:
    """Writes structured log records as single JSON lines.

    Build one per configuration and pass it around; nothing here is global.
    Errors raised by a custom format_log or json_value_serializer are not
    caught.
    """

    def __init__(
        self,
        config: Optional[EmitterConfig] = None,
        writer: Optional[LineWriter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._config = config or EmitterConfig()
        self._writer = writer or LineWriter()
        self._clock = clock or utc_now
        self._enabled = frozenset(enabled_levels(self._config.min_level))

    @property
    def config(self) -> EmitterConfig:
        return self._config

    def is_enabled(self, level: str) -> bool:
        return level in self._enabled

    def log(self, level: str, namespace: str, message: str, context: Optional[dict] = None):
        """Emit at a level given by name. Unknown names raise ValueError."""
        if not is_level(level):
            raise ValueError(f"Unknown log level {level!r}, expected one of {LOG_LEVELS}")
        self._handle(level, namespace, message, context)

    def trace(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("trace", namespace, message, context)

    def debug(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("debug", namespace, message, context)

    def info(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("info", namespace, message, context)

    def warn(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("warn", namespace, message, context)

    def error(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("error", namespace, message, context)

    def fatal(self, namespace: str, message: str, context: Optional[dict] = None):
        self._handle("fatal", namespace, message, context)

    def build_record(
        self, level: str, namespace: str, message: str, context: Optional[dict] = None
    ) -> LogRecord:
        timestamp = None
        if self._config.include_timestamp:
            timestamp = to_iso8601(self._clock())
        return LogRecord(
            level=level,
            level_n=rank(level),
            namespace=namespace,
            message=message,
            context=context if context is not None else {},
            timestamp=timestamp,
        )

    def _handle(self, level: str, namespace: str, message: str, context: Any):
        if level not in self._enabled:
            return
        record = self.build_record(level, namespace, message, context)
        line = self._config.format_log(record, self._config.json_value_serializer)
        self._writer.write(line)
