"""File facts for loaded documents: size, timestamps and content hash.

Hashing a large document is the slowest part of collecting these facts, so
digests are memoized per (path, size, mtime_ns). A file that changes on disk
gets a new key and is hashed again.
"""

import asyncio
import hashlib
import threading
from pathlib import Path
from typing import Union

from cachetools import LRUCache, cached

from ..models import FileInfo

HASH_CHUNK_SIZE = 1024 * 1024

_digest_cache = LRUCache(maxsize=1024)
_digest_lock = threading.Lock()


def sha256_file(path: Union[str, Path]) -> str:
    """SHA-256 hex digest of a file's contents."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


@cached(_digest_cache, lock=_digest_lock)
def _cached_digest(path: str, size: int, mtime_ns: int) -> str:
    # size and mtime_ns only take part in the cache key
    return sha256_file(path)


def clear_digest_cache() -> None:
    with _digest_lock:
        _digest_cache.clear()


def digest_cache_size() -> int:
    return len(_digest_cache)


def get_file_info(path: Union[str, Path]) -> FileInfo:
    """Collect name, size, timestamps and SHA-256 of a file.

    Raises:
        OSError: If the file cannot be stat'ed or read
    """
    file_path = Path(path).absolute()
    stat = file_path.stat()
    return FileInfo(
        name=file_path.name,
        path=str(file_path),
        size=stat.st_size,
        sha256=_cached_digest(str(file_path), stat.st_size, stat.st_mtime_ns),
        created=getattr(stat, "st_birthtime", stat.st_ctime),
        modified=stat.st_mtime,
    )


async def get_file_info_async(path: Union[str, Path]) -> FileInfo:
    """get_file_info in a worker thread."""
    return await asyncio.to_thread(get_file_info, path)
