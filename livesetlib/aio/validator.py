"""Project folder validation.

A project folder is named ``<name> Project`` and directly contains at least
one document plus the project-info folder. Every check runs so that all
violations are reported together.
"""

import asyncio
import os
import stat as stat_module
from pathlib import Path
from typing import Optional, Union

from ..constants import (
    DOCUMENT_EXTENSION,
    ERROR_BAD_SUFFIX,
    ERROR_NO_DOCUMENTS,
    ERROR_NO_INFO_FOLDER,
    ERROR_NOT_A_DIRECTORY,
    ERROR_PATH_MISSING,
    PROJECT_INFO_FOLDER,
    PROJECT_SUFFIX,
)
from ..errors import FatalFilesystemError
from ..models import ProjectValidationResult
from .adapters import AsyncFileSystemAdapter, FileSystemEntry


def project_name(path: Union[str, Path]) -> str:
    """Folder base name with the project suffix removed."""
    name = os.path.basename(os.path.abspath(path))
    if name.endswith(PROJECT_SUFFIX):
        return name[:-len(PROJECT_SUFFIX)]
    return name


async def validate_project(
    path: Union[str, Path],
    adapter: Optional[AsyncFileSystemAdapter] = None
) -> ProjectValidationResult:
    """Check a directory against project-folder conventions.

    Args:
        path: Directory to check
        adapter: Filesystem adapter used to list the directory

    Returns:
        The validation result; convention violations are reported in
        ``errors``, never raised

    Raises:
        FatalFilesystemError: If the directory exists but cannot be read
    """
    adapter = adapter or AsyncFileSystemAdapter()
    absolute = os.path.abspath(path)
    name = project_name(absolute)

    def _missing(message: str) -> ProjectValidationResult:
        return ProjectValidationResult(is_valid=False, path=absolute, name=name, errors=(message,))

    try:
        stat = await asyncio.to_thread(os.stat, absolute)
    except FileNotFoundError:
        return _missing(ERROR_PATH_MISSING)
    except OSError as e:
        raise FatalFilesystemError(absolute, e) from e

    if not stat_module.S_ISDIR(stat.st_mode):
        return _missing(ERROR_NOT_A_DIRECTORY)

    errors = []

    if not os.path.basename(absolute).endswith(PROJECT_SUFFIX):
        errors.append(ERROR_BAD_SUFFIX)

    try:
        entries = await adapter.list_entries(FileSystemEntry(absolute))
    except FileNotFoundError:
        return _missing(ERROR_PATH_MISSING)
    except OSError as e:
        raise FatalFilesystemError(absolute, e) from e

    has_documents = any(
        entry.is_file() and entry.name.endswith(DOCUMENT_EXTENSION) for entry in entries
    )
    has_info_folder = any(
        entry.is_dir() and entry.name == PROJECT_INFO_FOLDER for entry in entries
    )

    if not has_documents:
        errors.append(ERROR_NO_DOCUMENTS)
    if not has_info_folder:
        errors.append(ERROR_NO_INFO_FOLDER)

    return ProjectValidationResult(
        is_valid=not errors,
        path=absolute,
        name=name,
        errors=tuple(errors),
    )
