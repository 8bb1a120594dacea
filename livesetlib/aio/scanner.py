"""Recursive directory scans for documents and project folders.

Every scan is available two ways: as an async stream of ScanEvents that a
caller consumes incrementally to report progress, and as an eager function
that runs the stream to completion and returns the collected results.

Scans are depth-first and visit directory entries in the order the
filesystem returns them. An unreadable directory is handed to the scan's
error policy, reported as an ``error`` event, and the scan continues with
its siblings. Only the root being unreadable for a reason other than not
existing is fatal.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, List, Optional, Tuple, Union

from ..config import ScanConfig
from ..constants import BACKUP_FOLDER, DOCUMENT_EXTENSION, PROJECT_SUFFIX
from ..errors import FatalFilesystemError
from ..models import ProjectSearchResult, ProjectValidationResult
from .adapters import AsyncFileSystemAdapter, FileSystemEntry
from .error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from .validator import validate_project


class ScanEventType(Enum):
    SCANNING = "scanning"
    FOUND = "found"
    VALIDATING = "validating"
    PROJECT_FOUND = "project-found"
    ERROR = "error"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ScanEvent:
    type: ScanEventType
    path: Optional[str] = None
    depth: int = 0
    project: Optional[ProjectValidationResult] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> Optional[bool]:
        """Validity of the project carried by a project-found event."""
        return self.project.is_valid if self.project is not None else None


def is_backup(path: Union[str, Path]) -> bool:
    """True if the file sits directly inside a Backup folder."""
    return Path(path).parent.name == BACKUP_FOLDER


def is_document(entry: FileSystemEntry) -> bool:
    return entry.is_file() and os.path.splitext(entry.name)[1] == DOCUMENT_EXTENSION


class DirectoryScanner:
    """Walks a directory tree looking for documents or project folders.

    Every scan builds a fresh error policy from the configured factory, so
    errors never carry over between scans. ``policy`` is the policy of the
    most recent scan.
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        adapter: Optional[AsyncFileSystemAdapter] = None
    ):
        """Initialize scanner.

        Args:
            config: Scan configuration (defaults to ScanConfig())
            adapter: Filesystem adapter (created from config when None)
        """
        self.config = config or ScanConfig()
        self.policy: ErrorPolicy = self._new_policy()
        self.adapter = adapter or AsyncFileSystemAdapter(
            follow_symlinks=self.config.follow_symlinks
        )

    def _new_policy(self) -> ErrorPolicy:
        factory = self.config.error_policy or ContinueOnErrorsPolicy
        return factory()

    async def _read_directory(
        self,
        path: str,
        depth: int
    ) -> Tuple[Optional[List[FileSystemEntry]], Optional[Exception]]:
        try:
            return await self.adapter.list_entries(FileSystemEntry(path)), None
        except OSError as e:
            if depth == 0 and not isinstance(e, FileNotFoundError):
                raise FatalFilesystemError(path, e) from e
            await self.policy.handle(e, path)
            return None, e

    # Documents

    async def scan_documents(self, root: Union[str, Path]) -> AsyncIterator[ScanEvent]:
        """Stream a search for documents under root.

        Yields:
            ``scanning`` per directory, ``found`` per document, ``error``
            per unreadable directory, then a final ``complete``
        """
        self.policy = self._new_policy()
        root = os.path.abspath(root)
        async for event in self._walk_documents(root, 0):
            yield event
        yield ScanEvent(ScanEventType.COMPLETE, path=root)

    async def _walk_documents(self, path: str, depth: int) -> AsyncIterator[ScanEvent]:
        yield ScanEvent(ScanEventType.SCANNING, path=path, depth=depth)

        entries, error = await self._read_directory(path, depth)
        if error is not None:
            yield ScanEvent(ScanEventType.ERROR, path=path, depth=depth, error=str(error))
            return

        for entry in entries:
            if entry.is_dir():
                async for event in self._walk_documents(str(entry.path), depth + 1):
                    yield event
            elif is_document(entry):
                if self.config.include_backups or not is_backup(entry.path):
                    yield ScanEvent(ScanEventType.FOUND, path=str(entry.path), depth=depth)

    async def find_documents(self, root: Union[str, Path]) -> List[str]:
        """Absolute paths of all documents under root, in scan order."""
        return [
            event.path
            async for event in self.scan_documents(root)
            if event.type is ScanEventType.FOUND
        ]

    # Project folders

    async def scan_projects(self, root: Union[str, Path]) -> AsyncIterator[ScanEvent]:
        """Stream a search for project folders under root.

        A directory whose name carries the project suffix is validated and
        not descended into.

        Yields:
            ``scanning`` per directory searched, ``validating`` then
            ``project-found`` per candidate folder, ``error`` per unreadable
            directory, then a final ``complete``
        """
        self.policy = self._new_policy()
        root = os.path.abspath(root)
        async for event in self._walk_projects(root, 0):
            yield event
        yield ScanEvent(ScanEventType.COMPLETE, path=root)

    async def _walk_projects(self, path: str, depth: int) -> AsyncIterator[ScanEvent]:
        yield ScanEvent(ScanEventType.SCANNING, path=path, depth=depth)

        entries, error = await self._read_directory(path, depth)
        if error is not None:
            yield ScanEvent(ScanEventType.ERROR, path=path, depth=depth, error=str(error))
            return

        for entry in entries:
            if not entry.is_dir():
                continue
            child_path = str(entry.path)
            if entry.name.endswith(PROJECT_SUFFIX):
                yield ScanEvent(ScanEventType.VALIDATING, path=child_path, depth=depth + 1)
                try:
                    result = await validate_project(child_path, self.adapter)
                except FatalFilesystemError as e:
                    await self.policy.handle(e.error, child_path)
                    yield ScanEvent(ScanEventType.ERROR, path=child_path, depth=depth + 1, error=str(e.error))
                    continue
                yield ScanEvent(ScanEventType.PROJECT_FOUND, path=child_path, depth=depth + 1, project=result)
            else:
                async for event in self._walk_projects(child_path, depth + 1):
                    yield event

    async def find_projects(self, root: Union[str, Path]) -> ProjectSearchResult:
        """Project folders under root, split into valid and invalid."""
        valid = []
        invalid = []
        async for event in self.scan_projects(root):
            if event.type is ScanEventType.PROJECT_FOUND:
                (valid if event.project.is_valid else invalid).append(event.project)
        return ProjectSearchResult(valid=tuple(valid), invalid=tuple(invalid))


def _scanner(include_backups: bool = False, config: Optional[ScanConfig] = None) -> DirectoryScanner:
    if config is None:
        config = ScanConfig(include_backups=include_backups)
    return DirectoryScanner(config)


async def find_documents(
    root: Union[str, Path],
    include_backups: bool = False,
    config: Optional[ScanConfig] = None
) -> List[str]:
    """Find documents under root.

    Args:
        root: Directory to search
        include_backups: Include documents inside Backup folders
        config: Full scan configuration (overrides include_backups)

    Returns:
        Absolute document paths in scan order
    """
    return await _scanner(include_backups, config).find_documents(root)


async def find_documents_streaming(
    root: Union[str, Path],
    include_backups: bool = False,
    config: Optional[ScanConfig] = None
) -> AsyncIterator[ScanEvent]:
    """Streaming form of find_documents."""
    async for event in _scanner(include_backups, config).scan_documents(root):
        yield event


async def find_projects(
    root: Union[str, Path],
    config: Optional[ScanConfig] = None
) -> ProjectSearchResult:
    """Find and validate project folders under root."""
    return await _scanner(config=config).find_projects(root)


async def find_projects_streaming(
    root: Union[str, Path],
    config: Optional[ScanConfig] = None
) -> AsyncIterator[ScanEvent]:
    """Streaming form of find_projects."""
    async for event in _scanner(config=config).scan_projects(root):
        yield event
