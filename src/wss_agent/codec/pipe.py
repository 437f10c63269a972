"""
In-process bounded byte pipe connecting a producer thread to a consumer thread.

Writes block while the buffer is full, reads block while it is empty. Either
side can close its end: closing the write end signals EOF to the reader,
closing the read end makes pending and future writes fail with BrokenPipeError
so a producer never waits on a consumer that has gone away.
"""

import threading
from typing import Union

from wss_agent.codec.chunks import BYTES_BUFFER_SIZE

PIPE_CAPACITY = BYTES_BUFFER_SIZE


class BoundedPipe:
    def __init__(self, capacity: int = PIPE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._buffer = bytearray()
        self._cond = threading.Condition()
        self._write_closed = False
        self._read_closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    def write(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """Write all of ``data``, blocking for buffer space as needed."""
        view = memoryview(data).cast("B")
        total = len(view)
        offset = 0
        with self._cond:
            if self._write_closed:
                raise ValueError("write to closed pipe")
            while offset < total:
                while len(self._buffer) >= self._capacity and not self._read_closed:
                    self._cond.wait()
                if self._read_closed:
                    raise BrokenPipeError("pipe reader is closed")
                n = min(self._capacity - len(self._buffer), total - offset)
                self._buffer += view[offset:offset + n]
                offset += n
                self._cond.notify_all()
        return total

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all buffered bytes when negative).

        Blocks until at least one byte is available; returns b"" only at EOF.
        """
        with self._cond:
            while not self._buffer and not self._write_closed and not self._read_closed:
                self._cond.wait()
            if not self._buffer:
                return b""
            if size is None or size < 0 or size > len(self._buffer):
                size = len(self._buffer)
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
            self._cond.notify_all()
            return data

    def close_write(self) -> None:
        with self._cond:
            self._write_closed = True
            self._cond.notify_all()

    def close_read(self) -> None:
        with self._cond:
            self._read_closed = True
            self._buffer.clear()
            self._cond.notify_all()
