"""Async filesystem side of livesetlib.

Directory scans, project validation and document loading. Everything here
runs on a single event loop and suspends only at filesystem reads and
container decoding; sibling directories and sibling documents are never
processed in parallel.
"""

from .adapters import AsyncFileSystemAdapter, FileSystemEntry
from .error_policies import (
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    ErrorPolicy,
    FailFastPolicy,
    ThresholdPolicy,
)
from .validator import project_name, validate_project
from .scanner import (
    DirectoryScanner,
    ScanEvent,
    ScanEventType,
    find_documents,
    find_documents_streaming,
    find_projects,
    find_projects_streaming,
    is_backup,
)
from .progress import (
    ProgressEvent,
    ProgressRecorder,
    ProgressReporter,
    ProgressSink,
    batch_percent,
)
from .loader import load_live_set, load_project, load_project_directory, open_project

__all__ = [
    'AsyncFileSystemAdapter',
    'FileSystemEntry',
    'CollectErrorsPolicy',
    'ContinueOnErrorsPolicy',
    'ErrorPolicy',
    'FailFastPolicy',
    'ThresholdPolicy',
    'project_name',
    'validate_project',
    'DirectoryScanner',
    'ScanEvent',
    'ScanEventType',
    'find_documents',
    'find_documents_streaming',
    'find_projects',
    'find_projects_streaming',
    'is_backup',
    'ProgressEvent',
    'ProgressRecorder',
    'ProgressReporter',
    'ProgressSink',
    'batch_percent',
    'load_live_set',
    'load_project',
    'load_project_directory',
    'open_project',
]
