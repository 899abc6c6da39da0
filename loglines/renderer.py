"""Record renderer — colorized, human-readable form of JSON log lines."""

import json
from typing import Optional

from loglines.validator import RecordValidator

# ANSI color codes
COLORS = {
    "gray": "\033[90m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
}
RESET = "\033[0m"

# Seven characters plus a trailing space each, so headers line up.
LEVEL_TAGS = {
    "trace": ("TRACE > ", "gray"),
    "debug": ("DEBUG > ", "blue"),
    "info": (" INFO > ", "green"),
    "warn": (" WARN > ", "yellow"),
    "error": ("ERROR > ", "red"),
    "fatal": ("FATAL > ", "magenta"),
}

CONTEXT_INDENT = 2


def colorize(color: str, text: str, enabled: bool = True) -> str:
    """Wrap text in the ANSI code for color. Unknown colors leave it plain."""
    code = COLORS.get(color)
    if not enabled or code is None:
        return text
    return f"{code}{text}{RESET}"


class RecordRenderer:
    """Turns one wire-format line into display text.

    Lines that are not JSON, or are JSON without the record shape, come back
    unchanged apart from a dim color.
    """

    def __init__(self, color: bool = True, validator: Optional[RecordValidator] = None):
        self._color = color
        self._validator = validator or RecordValidator()

    @property
    def validator(self) -> RecordValidator:
        return self._validator

    def render(self, line: str) -> str:
        try:
            decoded = json.loads(line)
        except (ValueError, RecursionError):
            self._validator.count_unparsed()
            return self._passthrough(line)

        is_record, _ = self._validator.validate(decoded)
        if not is_record:
            return self._passthrough(line)
        return self._render_record(decoded)

    def _passthrough(self, line: str) -> str:
        return colorize("gray", line, self._color)

    def _render_record(self, record: dict) -> str:
        header = ""
        tag = LEVEL_TAGS.get(record["level"])
        if tag is not None:
            text, color = tag
            header += colorize(color, text, self._color)

        header += (
            f"[{colorize('cyan', record['namespace'], self._color)}] "
            f"{colorize('white', record['message'], self._color)}"
        )
        context = json.dumps(record["context"], indent=CONTEXT_INDENT, ensure_ascii=False)
        return header + "\n" + colorize("gray", context, self._color)


def render_line(line: str, color: bool = True) -> str:
    """One-off render of a single line."""
    return RecordRenderer(color=color).render(line)
