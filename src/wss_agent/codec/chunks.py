"""
Chunk planning — splits a payload string into contiguous slices that are
encoded and written one at a time.
"""

from typing import BinaryIO, Iterator, Optional

BYTES_BUFFER_SIZE = 32 * 1024
STRING_MAX_SIZE = BYTES_BUFFER_SIZE

ENCODING = "utf-8"


class ChunkPlan:
    """Chunk size for a payload of a given length.

    By default no chunk is longer than ``max_size`` characters. With
    ``proportional=True`` the older sizing is used instead: payloads longer than
    ``max_size`` get ``length // max_size`` characters per chunk, which grows
    with the payload.
    """

    __slots__ = ("length", "chunk_size")

    def __init__(self, length: int, chunk_size: int):
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        if length and chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1 for a non-empty payload, got {chunk_size}")
        self.length = length
        self.chunk_size = chunk_size

    @classmethod
    def for_length(cls, length: int, max_size: int = STRING_MAX_SIZE, proportional: bool = False) -> "ChunkPlan":
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if length <= max_size:
            size = length
        elif proportional:
            size = length // max_size
        else:
            size = max_size
        return cls(length, size)

    @classmethod
    def for_text(cls, text: str, max_size: int = STRING_MAX_SIZE, proportional: bool = False) -> "ChunkPlan":
        return cls.for_length(len(text), max_size=max_size, proportional=proportional)

    @property
    def count(self) -> int:
        if not self.length:
            return 0
        return -(-self.length // self.chunk_size)

    def spans(self) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` offsets covering ``[0, length)`` in order."""
        start = 0
        while start < self.length:
            end = min(start + self.chunk_size, self.length)
            yield start, end
            start = end

    def __repr__(self) -> str:
        return f"ChunkPlan(length={self.length}, chunk_size={self.chunk_size})"


def iter_chunks(text: str, plan: Optional[ChunkPlan] = None) -> Iterator[str]:
    plan = plan or ChunkPlan.for_text(text)
    for start, end in plan.spans():
        yield text[start:end]


def iter_chunk_bytes(text: str, plan: Optional[ChunkPlan] = None) -> Iterator[bytes]:
    """Like iter_chunks, but each slice is UTF-8 encoded on demand."""
    for chunk in iter_chunks(text, plan):
        yield chunk.encode(ENCODING)


def write_chunks(text: str, sink: BinaryIO, plan: Optional[ChunkPlan] = None) -> int:
    """Write ``text`` to ``sink`` chunk by chunk. Returns the number of bytes written."""
    written = 0
    for data in iter_chunk_bytes(text, plan):
        sink.write(data)
        written += len(data)
    return written
