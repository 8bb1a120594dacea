"""livesetlib - metadata extraction for Ableton Live Set documents.

livesetlib reads Live Set documents (gzip-compressed XML, ``.als``), walks the
parsed tree with schema-tolerant resolvers and produces an immutable summary:
version, tempo, track/device/plugin inventory, sample references and file
facts. It also discovers and validates project folders on disk.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Single document:
    live_set = await load_live_set("Song.als")

Project folder:
    project = await open_project("Song Project")
    result = await load_project(project)

Discovery:
    async for event in find_projects_streaming("~/Music"):
        ...
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.3.0"  # Batch loads isolate per-document failures

from . import tree
from . import extract
from . import io
from . import aio
from .config import BatchFailureMode, LoadConfig, ScanConfig, StageWindow
from .errors import (
    ContainerDecodeError,
    DocumentLoadError,
    FatalFilesystemError,
    InvalidProjectError,
    LiveSetError,
    MalformedNodeError,
    ScanIOError,
    TreeParseError,
    VersionParseError,
)
from .models import (
    DocumentFailure,
    FileInfo,
    LiveProject,
    LiveSet,
    LiveSetInfo,
    PluginDetail,
    PluginKind,
    ProjectLoadResult,
    ProjectSearchResult,
    ProjectValidationResult,
    SampleInfo,
    TrackDeviceInfo,
    VersionInfo,
)
from .tree import KeyPathMatch, find_by_keys, find_paths
from .extract import parse_version_string, resolve_tempo, unwrap_attribute_value
from .aio import (
    ProgressEvent,
    find_documents,
    find_documents_streaming,
    find_projects,
    find_projects_streaming,
    load_live_set,
    load_project,
    load_project_directory,
    open_project,
    validate_project,
)

__all__ = [
    "__version__",
    "tree",
    "extract",
    "io",
    "aio",
    "BatchFailureMode",
    "LoadConfig",
    "ScanConfig",
    "StageWindow",
    "ContainerDecodeError",
    "DocumentLoadError",
    "FatalFilesystemError",
    "InvalidProjectError",
    "LiveSetError",
    "MalformedNodeError",
    "ScanIOError",
    "TreeParseError",
    "VersionParseError",
    "DocumentFailure",
    "FileInfo",
    "LiveProject",
    "LiveSet",
    "LiveSetInfo",
    "PluginDetail",
    "PluginKind",
    "ProjectLoadResult",
    "ProjectSearchResult",
    "ProjectValidationResult",
    "SampleInfo",
    "TrackDeviceInfo",
    "VersionInfo",
    "KeyPathMatch",
    "find_by_keys",
    "find_paths",
    "parse_version_string",
    "resolve_tempo",
    "unwrap_attribute_value",
    "ProgressEvent",
    "find_documents",
    "find_documents_streaming",
    "find_projects",
    "find_projects_streaming",
    "load_live_set",
    "load_project",
    "load_project_directory",
    "open_project",
    "validate_project",
]
