"""Log levels — ordered severities and gating helpers."""

# Ascending order, least to most severe. Position is the level's rank.
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "fatal")

DEFAULT_MIN_LEVEL = "trace"

_RANKS = {level: i for i, level in enumerate(LOG_LEVELS)}


def is_level(name) -> bool:
    """True if name is one of the six known levels."""
    return name in _RANKS


def rank(level: str) -> int:
    """Return the rank (0-5) of a level, or -1 for an unknown name.

    -1 sorts below every real level, so an unknown minimum enables everything.
    """
    return _RANKS.get(level, -1)


def is_enabled(min_level: str, level: str) -> bool:
    """True if level is at or above the configured minimum."""
    return rank(level) >= rank(min_level)


def enabled_levels(min_level: str) -> tuple[str, ...]:
    """All levels that pass the given minimum, ascending."""
    return tuple(level for level in LOG_LEVELS if is_enabled(min_level, level))
