"""Adapters bridging the filesystem to scans and validation."""

from .filesystem import AsyncFileSystemAdapter, FileSystemEntry

__all__ = [
    'AsyncFileSystemAdapter',
    'FileSystemEntry',
]
