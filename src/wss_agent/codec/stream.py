"""
Streaming gzip + base64 codec for service payloads.

Each call runs two worker threads joined by a BoundedPipe: a producer that
feeds bytes into the pipe and a consumer that runs the gzip stage on the other
end. The pipe bounds how much plaintext is in flight between the two stages.
The calling thread blocks until both workers finish; there is no timeout at
this layer.
"""

import base64
import binascii
import codecs
import gzip
import io
import logging
import zlib
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Optional

from wss_agent.codec.chunks import BYTES_BUFFER_SIZE, ENCODING, ChunkPlan, write_chunks
from wss_agent.codec.pipe import BoundedPipe
from wss_agent.errors import CodecError, CompressionTaskError

log = logging.getLogger("wss_agent.codec.stream")

N_THREADS = 2

# Errors gzip raises on a corrupt or truncated stream
DECODE_ERRORS = (gzip.BadGzipFile, EOFError, zlib.error)


def compress_string(text: Optional[str], proportional: bool = False) -> Optional[str]:
    """Gzip ``text`` and return the compressed stream as base64.

    Empty or None input is returned unchanged. Raises CompressionTaskError if
    either worker fails; a partial result is never returned.
    """
    if not text:
        return text

    plan = ChunkPlan.for_text(text, proportional=proportional)
    log.debug(f"Compressing {plan.length} chars in {plan.count} chunks")

    pipe = BoundedPipe()
    sink = io.BytesIO()
    error = _transfer(
        lambda: _produce_text(text, plan, pipe),
        lambda: _consume_compress(pipe, sink),
    )
    if error is not None:
        log.error(f"Compression task failed: {error!r}")
        raise CompressionTaskError(f"Failed to compress payload: {error}") from error
    return encode_base64(sink.getvalue())


def decompress_string(text: Optional[str]) -> Optional[str]:
    """Decode base64, gunzip and return the original text.

    Empty or None input is returned unchanged. Raises CodecError on malformed
    base64, gzip or UTF-8.
    """
    if not text:
        return text

    raw = decode_base64(text)
    if not raw:
        raise CodecError("Payload holds no compressed data")
    pipe = BoundedPipe()
    out = io.StringIO()
    error = _transfer(
        lambda: _produce_bytes(raw, pipe),
        lambda: _consume_decompress(pipe, out),
    )
    if error is not None:
        log.error(f"Decompression task failed: {error!r}")
        raise CodecError(f"Failed to decompress payload: {error}") from error
    return out.getvalue()


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Strict standard-alphabet decode. Line breaks and other whitespace are ignored."""
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid base64 payload: {e}") from e


def _transfer(producer: Callable[[], None], consumer: Callable[[], None]) -> Optional[BaseException]:
    """Run producer and consumer concurrently and wait for both.

    Returns the root-cause exception, if any. A BrokenPipeError in the producer
    is a consequence of the consumer failing, so the consumer's error wins then.
    """
    with ThreadPoolExecutor(max_workers=N_THREADS, thread_name_prefix="wss-codec") as pool:
        # both must be running at once: the producer blocks once the pipe fills
        produced = pool.submit(producer)
        consumed = pool.submit(consumer)
        wait([produced, consumed])

    producer_error = produced.exception()
    consumer_error = consumed.exception()
    if producer_error is not None and not isinstance(producer_error, BrokenPipeError):
        return producer_error
    return consumer_error or producer_error


def _produce_text(text: str, plan: ChunkPlan, pipe: BoundedPipe) -> None:
    try:
        write_chunks(text, pipe, plan)
    finally:
        pipe.close_write()


def _produce_bytes(data: bytes, pipe: BoundedPipe) -> None:
    view = memoryview(data)
    try:
        for start in range(0, len(view), BYTES_BUFFER_SIZE):
            pipe.write(view[start:start + BYTES_BUFFER_SIZE])
    finally:
        pipe.close_write()


def _consume_compress(pipe: BoundedPipe, sink: io.BytesIO) -> None:
    try:
        # mtime=0 keeps the output deterministic for identical input
        with gzip.GzipFile(fileobj=sink, mode="wb", mtime=0) as out:
            while True:
                data = pipe.read(BYTES_BUFFER_SIZE)
                if not data:
                    break
                out.write(data)
    finally:
        pipe.close_read()


def _consume_decompress(pipe: BoundedPipe, out: io.StringIO) -> None:
    decoder = codecs.getincrementaldecoder(ENCODING)()
    try:
        with gzip.GzipFile(fileobj=pipe, mode="rb") as src:
            while True:
                data = src.read(BYTES_BUFFER_SIZE)
                if not data:
                    break
                # the incremental decoder holds back a code point split across reads
                out.write(decoder.decode(data))
        out.write(decoder.decode(b"", final=True))
    finally:
        pipe.close_read()
