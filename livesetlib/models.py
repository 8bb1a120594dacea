"""Data model for extracted document metadata.

All records are frozen dataclasses: they are built once when a load or
validation finishes and never change afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .constants import EXTERNAL_SAMPLE
from .tree.node import DocumentTree


@dataclass(frozen=True)
class VersionInfo:
    app: str
    major: int
    minor: int
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'app': self.app,
            'major': self.major,
            'minor': self.minor,
            'patch': self.patch,
        }


@dataclass(frozen=True)
class ProjectValidationResult:
    """Outcome of checking a directory against project-folder conventions.

    Errors accumulate: every applicable check runs, so all violations are
    reported together.
    """

    is_valid: bool
    path: str
    name: Optional[str] = None
    errors: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isValid': self.is_valid,
            'path': self.path,
            'name': self.name,
            'errors': list(self.errors),
        }


class PluginKind(Enum):
    AU = "AU"
    VST = "VST"
    VST3 = "VST3"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class PluginDetail:
    name: str = ""
    manufacturer: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'manufacturer': self.manufacturer,
            'path': self.path,
        }


@dataclass(frozen=True)
class TrackDeviceInfo:
    """Devices and plugins found on one track."""

    name: str
    track_type: str
    devices: FrozenSet[str] = frozenset()
    plugins: Tuple[Tuple[PluginKind, PluginDetail], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.track_type,
            'devices': sorted(self.devices),
            'plugins': [
                {'kind': kind.value, **detail.to_dict()}
                for kind, detail in self.plugins
            ],
        }


@dataclass(frozen=True)
class SampleInfo:
    path: str
    size_bytes: int
    classification: str

    @property
    def is_external(self) -> bool:
        return self.classification == EXTERNAL_SAMPLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'size': self.size_bytes,
            'type': self.classification,
        }


@dataclass(frozen=True)
class FileInfo:
    """Filesystem facts about a document file."""

    name: str
    path: str
    size: int
    sha256: str
    created: float
    modified: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'size': self.size,
            'sha256': self.sha256,
            'created': self.created,
            'modified': self.modified,
        }


AUDIO_TRACK = "AudioTrack"
MIDI_TRACK = "MidiTrack"


@dataclass(frozen=True)
class LiveSetInfo:
    """Everything extracted from one document, computed once at load time."""

    name: str
    location: str
    version: VersionInfo
    tempo: str
    track_counts: Mapping[str, int]
    tracks: Tuple[TrackDeviceInfo, ...]
    samples: Tuple[SampleInfo, ...]
    file_info: FileInfo

    @property
    def track_count(self) -> int:
        """Number of audio and MIDI tracks."""
        return self.track_counts.get(AUDIO_TRACK, 0) + self.track_counts.get(MIDI_TRACK, 0)

    @property
    def sha256(self) -> str:
        return self.file_info.sha256

    @property
    def size(self) -> int:
        return self.file_info.size

    def unique_plugins(self) -> List[Tuple[PluginKind, PluginDetail]]:
        """Distinct plugins across all tracks, in first-seen order."""
        seen = []
        for track in self.tracks:
            for plugin in track.plugins:
                if plugin not in seen:
                    seen.append(plugin)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        data = self.file_info.to_dict()
        data.update({
            'name': self.name,
            'location': self.location,
            'tempo': self.tempo,
            'version': self.version.to_dict(),
            'trackCount': self.track_count,
            'trackCounts': dict(self.track_counts),
            'tracks': [track.to_dict() for track in self.tracks],
            'samples': [sample.to_dict() for sample in self.samples],
        })
        return data


@dataclass(frozen=True)
class LiveSet:
    """A loaded document: its path, read-only tree and extracted info."""

    path: str
    tree: DocumentTree = field(repr=False, compare=False)
    info: LiveSetInfo = field(compare=False)


@dataclass(frozen=True)
class LiveProject:
    """A validated project folder and the documents found inside it."""

    path: str
    name: str
    document_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentFailure:
    path: str
    error: Exception


@dataclass(frozen=True)
class ProjectLoadResult:
    live_sets: Tuple[LiveSet, ...] = ()
    failures: Tuple[DocumentFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class ProjectSearchResult:
    """Project folders found under a root, split by validity."""

    valid: Tuple[ProjectValidationResult, ...] = ()
    invalid: Tuple[ProjectValidationResult, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'valid': [p.to_dict() for p in self.valid],
            'invalid': [p.to_dict() for p in self.invalid],
        }
