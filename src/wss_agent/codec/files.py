"""
File-backed codec for payloads too large to stage in memory.

Input and output are staged through uniquely named temporary files in an
explicit directory. Every scratch file is removed on every exit path; the only
file that survives is the one decompress_chunks hands back, which the caller
owns and must delete.
"""

import codecs
import gzip
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from wss_agent.codec.chunks import BYTES_BUFFER_SIZE, ENCODING, ChunkPlan, write_chunks
from wss_agent.codec.stream import DECODE_ERRORS, decode_base64, encode_base64
from wss_agent.errors import CodecError, CompressionTaskError

log = logging.getLogger("wss_agent.codec.files")

TMP_IN_PREFIX = "tmp_in_"
TMP_OUT_PREFIX = "tmp_out_"
TMP_SUFFIX = ".json"

# Multiples of 3 raw bytes / 4 base64 chars encode and decode independently
ENCODE_BLOCK = 3 * BYTES_BUFFER_SIZE
DECODE_BLOCK = 4 * BYTES_BUFFER_SIZE


class FileCodec:
    def __init__(self, temp_dir: Optional[Union[str, Path]] = None, proportional: bool = False):
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.proportional = proportional

    def compress_chunks(self, text: Optional[str]) -> Optional[str]:
        """Gzip ``text`` through temp files and return the base64 result.

        Empty or None input is returned unchanged and touches no files.
        """
        if not text:
            return text

        plan = ChunkPlan.for_text(text, proportional=self.proportional)
        with self._scratch_file(TMP_IN_PREFIX) as tmp_in, self._scratch_file(TMP_OUT_PREFIX) as tmp_out:
            try:
                with open(tmp_in, "wb") as f:
                    write_chunks(text, f, plan)
                with open(tmp_in, "rb") as src, open(tmp_out, "wb") as raw:
                    # header carries no file name or mtime, as with compress_string
                    with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=0) as dst:
                        shutil.copyfileobj(src, dst, BYTES_BUFFER_SIZE)
            except (OSError, UnicodeEncodeError) as e:
                log.error(f"Chunked compression failed: {e!r}")
                raise CompressionTaskError(f"Failed to compress payload: {e}") from e

            parts = []
            with open(tmp_out, "rb") as f:
                while True:
                    block = f.read(ENCODE_BLOCK)
                    if not block:
                        break
                    parts.append(encode_base64(block))
            log.debug(f"Compressed {plan.length} chars via {tmp_in.name} -> {tmp_out.name}")
            return "".join(parts)

    def decompress_chunks(self, text: Optional[str]) -> Optional[Path]:
        """Decode base64 ``text`` and gunzip it into a new temp file.

        Returns the path of that file, which the caller must delete, or None
        for empty input. Raises CodecError on malformed input, in which case no
        file is left behind.
        """
        if not text:
            return None

        encoded = "".join(text.split())
        result = self._new_temp_file(TMP_OUT_PREFIX)
        try:
            with self._scratch_file(TMP_IN_PREFIX) as tmp_in:
                with open(tmp_in, "wb") as f:
                    for start in range(0, len(encoded), DECODE_BLOCK):
                        f.write(decode_base64(encoded[start:start + DECODE_BLOCK]))
                if tmp_in.stat().st_size == 0:
                    raise CodecError("Payload holds no compressed data")
                try:
                    with gzip.open(tmp_in, "rb") as src, open(result, "wb") as dst:
                        _copy_utf8(src, dst)
                except DECODE_ERRORS + (UnicodeDecodeError,) as e:
                    raise CodecError(f"Failed to decompress payload: {e}") from e
        except BaseException:
            result.unlink(missing_ok=True)
            raise
        log.debug(f"Decompressed payload into {result}")
        return result

    def _new_temp_file(self, prefix: str) -> Path:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=TMP_SUFFIX, dir=self.temp_dir)
        os.close(fd)
        return Path(name)

    @contextmanager
    def _scratch_file(self, prefix: str) -> Iterator[Path]:
        path = self._new_temp_file(prefix)
        try:
            yield path
        finally:
            path.unlink(missing_ok=True)


def _copy_utf8(src, dst) -> None:
    """Copy bytes from src to dst, failing on anything that is not UTF-8."""
    decoder = codecs.getincrementaldecoder(ENCODING)()
    while True:
        block = src.read(BYTES_BUFFER_SIZE)
        if not block:
            break
        decoder.decode(block)
        dst.write(block)
    decoder.decode(b"", final=True)


def compress_chunks(text: Optional[str], temp_dir: Optional[Union[str, Path]] = None) -> Optional[str]:
    return FileCodec(temp_dir).compress_chunks(text)


def decompress_chunks(text: Optional[str], temp_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    return FileCodec(temp_dir).decompress_chunks(text)
