"""Document and project loading.

A document load runs: file facts, streamed container decode, parse,
extraction, completion. Everything extracted is computed once and frozen
into a LiveSetInfo. A project load validates the folder, finds its
non-backup documents and loads them strictly one at a time in discovery
order, so every progress event belongs to exactly one document.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Union

from ..config import BatchFailureMode, LoadConfig
from ..errors import (
    ContainerDecodeError,
    DocumentLoadError,
    InvalidProjectError,
    LiveSetError,
)
from ..extract import (
    count_tracks,
    extract_samples,
    extract_tracks,
    resolve_tempo,
    resolve_version,
)
from ..io import decode_streaming, get_file_info_async, parse_document
from ..models import (
    DocumentFailure,
    LiveProject,
    LiveSet,
    LiveSetInfo,
    ProjectLoadResult,
)
from .progress import ProgressEvent, ProgressReporter, ProgressSink, batch_percent
from .scanner import find_documents
from .validator import validate_project

logger = logging.getLogger(__name__)


async def load_live_set(
    path: Union[str, Path],
    progress: Optional[ProgressSink] = None,
    config: Optional[LoadConfig] = None
) -> LiveSet:
    """Load one document and extract its metadata.

    Args:
        path: Document file
        progress: Optional sink receiving ProgressEvents
        config: Load configuration (stage windows, chunk size)

    Returns:
        The loaded LiveSet

    Raises:
        ContainerDecodeError: If the file cannot be read or decompressed
        TreeParseError: If the content is not well-formed
        MalformedNodeError: If a track name lacks its value wrapper
        VersionParseError: If the Creator string has no version
    """
    config = config or LoadConfig()
    reporter = ProgressReporter(progress)
    path = str(path)

    reporter.emit("reading-file", 0.0, path=path)
    try:
        file_info = await get_file_info_async(path)
    except OSError as e:
        reporter.emit("error", path=path, error=str(e))
        raise ContainerDecodeError(path, str(e)) from e

    raw = None
    stream = decode_streaming(path, config.chunk_size)
    try:
        async for event in stream:
            if event.stage == "complete":
                raw = event.data
            elif event.stage == "error":
                reporter.emit("error", path=path, error=event.error)
                raise ContainerDecodeError(path, event.error)
            else:
                reporter.emit(
                    event.stage,
                    config.decode_window.scale(event.percent / 100.0),
                    path=path,
                    bytes_read=event.bytes_read,
                    bytes_total=event.bytes_total,
                )
    finally:
        # Releases the container file on every exit path
        await stream.aclose()
    if raw is None:
        reporter.emit("error", path=path, error="decoder finished without data")
        raise ContainerDecodeError(path, "decoder finished without data")

    try:
        reporter.emit("parsing-xml", config.parse_window.start, path=path)
        tree = parse_document(raw)
        reporter.emit("parsing-complete", config.parse_window.end, path=path)

        samples = extract_samples(tree)
        reporter.emit("samples-extracted", config.extract_window.scale(0.5), path=path)

        tracks = extract_tracks(tree)
        track_counts = count_tracks(tree)
        reporter.emit("tracks-extracted", config.extract_window.end, path=path)

        version = resolve_version(tree)
    except LiveSetError as e:
        reporter.emit("error", path=path, error=str(e))
        raise

    info = LiveSetInfo(
        name=file_info.name,
        location=file_info.path,
        version=version,
        tempo=resolve_tempo(tree),
        track_counts=MappingProxyType(track_counts),
        tracks=tracks,
        samples=samples,
        file_info=file_info,
    )
    reporter.emit("complete", 100.0, path=path)
    return LiveSet(path=file_info.path, tree=tree, info=info)


async def open_project(directory: Union[str, Path]) -> LiveProject:
    """Validate a project folder and list its documents.

    Documents in Backup folders are left out.

    Raises:
        InvalidProjectError: If the folder breaks project conventions
        FatalFilesystemError: If the folder exists but cannot be read
    """
    result = await validate_project(directory)
    if not result.is_valid:
        raise InvalidProjectError(result)
    document_paths = await find_documents(result.path, include_backups=False)
    return LiveProject(path=result.path, name=result.name, document_paths=tuple(document_paths))


async def load_project(
    project: LiveProject,
    progress: Optional[ProgressSink] = None,
    config: Optional[LoadConfig] = None
) -> ProjectLoadResult:
    """Load every document of a project, one at a time.

    With BatchFailureMode.SKIP (the default) a failing document is logged,
    recorded in the result's ``failures`` and the batch continues. With
    BatchFailureMode.ABORT the first failure stops the batch.

    Raises:
        DocumentLoadError: On the first failing document, in ABORT mode
    """
    config = config or LoadConfig()
    reporter = ProgressReporter(progress)
    total = len(project.document_paths)
    completed = 0
    live_sets = []
    failures = []

    reporter.emit("loading-sets", 0.0, completed=0, total=total)

    for index, document_path in enumerate(project.document_paths):
        def forward(event: ProgressEvent) -> None:
            reporter.emit(
                "set-progress",
                batch_percent(completed, total),
                path=document_path,
                index=index,
                nested=event,
            )

        try:
            live_set = await load_live_set(document_path, forward, config)
        except LiveSetError as e:
            if config.failure_mode is BatchFailureMode.ABORT:
                reporter.emit("error", path=document_path, error=str(e))
                raise DocumentLoadError(document_path, e) from e
            logger.warning("Skipping %s: %s", document_path, e)
            failures.append(DocumentFailure(path=document_path, error=e))
        else:
            live_sets.append(live_set)

        completed += 1
        reporter.emit("loading-sets", batch_percent(completed, total), completed=completed, total=total)

    reporter.emit("complete", 100.0, completed=total, total=total)
    return ProjectLoadResult(live_sets=tuple(live_sets), failures=tuple(failures))


async def load_project_directory(
    directory: Union[str, Path],
    progress: Optional[ProgressSink] = None,
    config: Optional[LoadConfig] = None
) -> ProjectLoadResult:
    """open_project followed by load_project."""
    project = await open_project(directory)
    return await load_project(project, progress, config)
