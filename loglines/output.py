"""Line output sink: one locked write per log line."""

import sys
import threading


class LineWriter:
    """Appends whole lines to a text stream, thread-safe.

    With no stream given, writes go to whatever sys.stdout is at write time.
    """

    def __init__(self, stream=None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    def write(self, line: str):
        with self._lock:
            stream = self.stream
            stream.write(line + "\n")
            stream.flush()
