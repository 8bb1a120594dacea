"""Document container decoding.

Live documents are gzip-compressed XML. Files without the gzip magic bytes
are read as plain XML so uncompressed exports load the same way.
"""

import asyncio
import gzip
import os
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from ..errors import ContainerDecodeError

GZIP_MAGIC = b"\x1f\x8b"
DEFAULT_CHUNK_SIZE = 64 * 1024

_DECODE_ERRORS = (OSError, EOFError, zlib.error, UnicodeDecodeError)


@dataclass(frozen=True)
class DecodeEvent:
    """Progress of a streaming decode.

    The stream ends with exactly one ``complete`` (carrying ``data``) or
    ``error`` (carrying ``error``) event.
    """

    stage: str
    percent: float = 0.0
    bytes_read: Optional[int] = None
    bytes_total: Optional[int] = None
    data: Optional[str] = field(default=None, repr=False)
    error: Optional[str] = None
    path: Optional[str] = None


def is_gzip_file(path: Union[str, Path]) -> bool:
    with open(path, "rb") as f:
        return f.read(2) == GZIP_MAGIC


def decode(path: Union[str, Path]) -> str:
    """Read a document container fully and return its text.

    Raises:
        ContainerDecodeError: If the file cannot be read or decompressed
    """
    try:
        if is_gzip_file(path):
            with gzip.open(path, "rb") as f:
                raw = f.read()
        else:
            raw = Path(path).read_bytes()
        return raw.decode("utf-8")
    except _DECODE_ERRORS as e:
        raise ContainerDecodeError(str(path), str(e)) from e


async def decode_streaming(
    path: Union[str, Path],
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[DecodeEvent]:
    """Decode a container chunk by chunk, reporting progress as it goes.

    Each chunk read runs in a worker thread and is a suspension point.
    Percentages run 0 (reading), 25 (unzipping), 25-95 by compressed bytes
    consumed (processing), then 100 (complete).

    Yields:
        DecodeEvent objects; failures end the stream with an error event
        rather than raising
    """
    path = str(path)
    yield DecodeEvent(stage="reading", percent=0.0, path=path)

    try:
        total = (await asyncio.to_thread(os.stat, path)).st_size
        compressed = await asyncio.to_thread(is_gzip_file, path)
        raw = await asyncio.to_thread(open, path, "rb")
    except OSError as e:
        yield DecodeEvent(stage="error", error=str(e), path=path)
        return

    try:
        yield DecodeEvent(stage="unzipping", percent=25.0, bytes_total=total, path=path)

        stream = gzip.GzipFile(fileobj=raw, mode="rb") if compressed else raw
        chunks = []
        bytes_read = 0
        while True:
            chunk = await asyncio.to_thread(stream.read, chunk_size)
            if not chunk:
                break
            chunks.append(chunk)
            bytes_read += len(chunk)
            consumed = raw.tell()
            percent = min(95.0, 25.0 + (consumed / total) * 70.0) if total else 95.0
            yield DecodeEvent(
                stage="processing",
                percent=percent,
                bytes_read=bytes_read,
                bytes_total=total,
                path=path,
            )
        text = b"".join(chunks).decode("utf-8")
    except _DECODE_ERRORS as e:
        yield DecodeEvent(stage="error", error=str(e), path=path)
        return
    finally:
        raw.close()

    yield DecodeEvent(stage="complete", percent=100.0, data=text, path=path)
