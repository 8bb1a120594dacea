"""Async filesystem adapter for directory scans.

Directory listings use os.scandir in a worker thread, so each listing is a
single suspension point and DirEntry's cached type information saves a
stat call per entry.
"""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Union


class FileSystemEntry:
    """A file or directory met during a scan.

    Wraps an optional os.DirEntry so type checks reuse the information
    the directory listing already returned.
    """

    def __init__(self, path: Union[str, Path], *, entry: Optional[os.DirEntry] = None):
        self.path = Path(path) if not isinstance(path, Path) else path
        self._entry = entry

    @property
    def name(self) -> str:
        return self.path.name

    def is_dir(self) -> bool:
        if self._entry is not None:
            return self._entry.is_dir(follow_symlinks=True)
        return self.path.is_dir()

    def is_file(self) -> bool:
        if self._entry is not None:
            return self._entry.is_file(follow_symlinks=True)
        return self.path.is_file()

    def __repr__(self) -> str:
        return f"FileSystemEntry({self.path})"


class AsyncFileSystemAdapter:
    """Lists directory contents for scans and validation.

    Entries come back in the order the filesystem returns them, unsorted.
    Symbolic links are skipped unless follow_symlinks is set.
    """

    def __init__(self, follow_symlinks: bool = False):
        """Initialize filesystem adapter.

        Args:
            follow_symlinks: Whether to report (and so descend into) symbolic links
        """
        self.follow_symlinks = follow_symlinks

    async def list_entries(self, node: FileSystemEntry) -> List[FileSystemEntry]:
        """Read a directory.

        Raises:
            OSError: If the directory cannot be read
        """
        def _scan_directory_sync(path: Path) -> List[os.DirEntry]:
            with os.scandir(path) as iterator:
                return list(iterator)

        entries = await asyncio.to_thread(_scan_directory_sync, node.path)

        children = []
        for entry in entries:
            if not self.follow_symlinks and entry.is_symlink():
                continue
            children.append(FileSystemEntry(Path(entry.path), entry=entry))
        return children
