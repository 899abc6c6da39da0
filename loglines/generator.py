"""Sample log generator — a steady stream of records across every level.

Handy for exercising the pretty printer:

    python main.py generate --interval 0.2 | python main.py pretty
"""

import logging
import threading
import uuid
from itertools import count as counter
from typing import Optional

from loglines.emitter import Emitter
from loglines.levels import LOG_LEVELS

logger = logging.getLogger(__name__)


def random_context(size: int) -> dict:
    """size random uuid -> uuid pairs."""
    return {str(uuid.uuid4()): str(uuid.uuid4()) for _ in range(size)}


def generate_logs(
    emitter: Emitter,
    namespace: str,
    count: Optional[int] = None,
    interval: float = 1.0,
    context_keys: int = 10,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Emit records cycling trace..fatal until count is reached or stopped.

    Returns the number of records emitted (including ones the emitter's
    minimum level filtered out).
    """
    stop_event = stop_event or threading.Event()
    emitted = 0

    for i in counter():
        if count is not None and emitted >= count:
            break
        if stop_event.is_set():
            break

        level = LOG_LEVELS[i % len(LOG_LEVELS)]
        emitter.log(
            level,
            namespace,
            f"Test message {uuid.uuid4()}",
            random_context(context_keys),
        )
        emitted += 1

        if count is not None and emitted >= count:
            break
        if interval > 0 and stop_event.wait(interval):
            break

    logger.debug("Generated %d records", emitted)
    return emitted
