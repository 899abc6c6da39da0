"""Line assembly — rebuild newline-delimited lines from arbitrary chunks."""

import codecs
from typing import AsyncIterable, AsyncIterator, BinaryIO, Iterable, Iterator, Union

Chunk = Union[bytes, bytearray, str]

DEFAULT_CHUNK_SIZE = 65536


class LineAssembler:
    """Stateful chunk-to-line splitter for a single consumer.

    Chunks need not line up with line boundaries. Bytes are decoded
    incrementally, so a multi-byte character split across two chunks comes
    out whole.
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._pending = ""

    @property
    def pending(self) -> str:
        """Text seen since the last newline."""
        return self._pending

    def feed(self, chunk: Chunk) -> list[str]:
        """Add a chunk; return the lines it completed, without terminators."""
        text = chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        if "\n" not in text:
            self._pending += text
            return []
        *lines, self._pending = (self._pending + text).split("\n")
        return lines

    def close(self) -> str:
        """End of stream: drop and return any unterminated tail."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        self._decoder.reset()
        return tail


def iter_lines(chunks: Iterable[Chunk], encoding: str = "utf-8") -> Iterator[str]:
    """Lazily yield complete lines from a chunk stream.

    Content after the final newline is discarded at end of stream.
    """
    assembler = LineAssembler(encoding=encoding)
    for chunk in chunks:
        yield from assembler.feed(chunk)
    assembler.close()


async def aiter_lines(
    chunks: AsyncIterable[Chunk], encoding: str = "utf-8"
) -> AsyncIterator[str]:
    """Async counterpart of iter_lines."""
    assembler = LineAssembler(encoding=encoding)
    async for chunk in chunks:
        for line in assembler.feed(chunk):
            yield line
    assembler.close()


def read_chunks(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield chunks from a binary stream until it returns an empty read.

    Prefers read1() so interactive input is handed over as soon as it
    arrives instead of waiting for a full chunk.
    """
    read = getattr(stream, "read1", None) or stream.read
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk
