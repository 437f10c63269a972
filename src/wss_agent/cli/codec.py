"""CLI: wss compress|decompress"""

import shutil
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from wss_agent.codec.chunks import BYTES_BUFFER_SIZE, ENCODING
from wss_agent.codec.files import FileCodec
from wss_agent.codec.stream import compress_string, decompress_string
from wss_agent.config import Settings
from wss_agent.errors import CodecError, CompressionTaskError

console = Console(stderr=True)


def _temp_dir() -> Optional[Path]:
    return Settings().temp_dir


# Payloads are read and written as bytes so line endings pass through untouched.

@click.command("compress")
@click.argument("source", type=click.File("rb"), default="-")
@click.option("-o", "--output", type=click.File("wb"), default="-")
@click.option("--chunked", is_flag=True, help="Stage through temporary files to bound memory.")
def compress_cmd(source, output, chunked: bool):
    """Gzip a text payload and print it as base64."""
    try:
        text = source.read().decode(ENCODING)
        if chunked:
            result = FileCodec(_temp_dir()).compress_chunks(text)
        else:
            result = compress_string(text)
    except (UnicodeDecodeError, CompressionTaskError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    output.write(result.encode("ascii"))


@click.command("decompress")
@click.argument("source", type=click.File("rb"), default="-")
@click.option("-o", "--output", type=click.File("wb"), default="-")
@click.option("--chunked", is_flag=True, help="Stage through temporary files to bound memory.")
def decompress_cmd(source, output, chunked: bool):
    """Decode a base64 gzip payload back into text."""
    try:
        text = source.read().decode("ascii")
        if not chunked:
            output.write(decompress_string(text).encode(ENCODING))
            return
        path = FileCodec(_temp_dir()).decompress_chunks(text)
    except (UnicodeDecodeError, CodecError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    if path is None:
        return
    try:
        with open(path, "rb") as f:
            shutil.copyfileobj(f, output, BYTES_BUFFER_SIZE)
    finally:
        path.unlink(missing_ok=True)
