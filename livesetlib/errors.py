"""Exception taxonomy for livesetlib.

Fatal conditions are raised; project-folder convention violations are never
raised and travel as data in ProjectValidationResult.errors.
"""

from typing import Any, Optional


class LiveSetError(Exception):
    """Base exception for all livesetlib errors."""
    pass


class ContainerDecodeError(LiveSetError):
    """The document container could not be read or decompressed."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Error reading document container {path}: {message}")


class TreeParseError(LiveSetError):
    """The decoded document text is not well-formed."""
    pass


class MalformedNodeError(LiveSetError):
    """A node lacks the attribute-value wrapper the schema requires."""

    def __init__(self, serialized: str, message: Optional[str] = None):
        self.serialized = serialized
        super().__init__(message or f"Unexpected node structure: {serialized}")


class VersionParseError(LiveSetError):
    """The Creator string does not carry a recognisable version."""

    def __init__(self, creator: Any):
        self.creator = creator
        super().__init__(f"Cannot parse version from creator string: {creator!r}")


class ScanIOError(LiveSetError):
    """A directory could not be read during a scan."""

    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Error accessing {path}: {error}")


class FatalFilesystemError(LiveSetError):
    """The root of an operation is inaccessible for a reason other than absence."""

    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Cannot access {path}: {error}")


class InvalidProjectError(LiveSetError):
    """A directory opened as a project does not follow project conventions."""

    def __init__(self, result):
        self.result = result
        details = "\n ".join(result.errors)
        super().__init__(f"Directory {result.path} isn't a Live project:\n {details}")


class DocumentLoadError(LiveSetError):
    """A document failed while loading a whole project."""

    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Error loading {path}: {error}")
