"""Configuration objects for scans and loads.

Scan and load behaviour that callers may tune lives here. Naming conventions
of documents and project folders are fixed and live in constants.py.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class BatchFailureMode(Enum):
    """What a multi-document project load does when one document fails."""
    SKIP = "skip"       # Record the failure and continue with the next document
    ABORT = "abort"     # Stop the batch and raise DocumentLoadError


@dataclass
class ScanConfig:
    """Configuration for directory scans."""

    include_backups: bool = False    # Include documents inside Backup folders
    follow_symlinks: bool = False    # Descend into symlinked directories
    # Builds the ErrorPolicy for each scan (ContinueOnErrorsPolicy when None)
    error_policy: Optional[Callable[[], Any]] = None


@dataclass(frozen=True)
class StageWindow:
    """A sub-range of the 0-100 progress scale owned by one load stage."""

    start: float
    end: float

    def scale(self, fraction: float) -> float:
        """Map a 0.0-1.0 fraction of this stage onto the overall scale."""
        fraction = min(max(fraction, 0.0), 1.0)
        return self.start + (self.end - self.start) * fraction


@dataclass
class LoadConfig:
    """Configuration for document and project loads.

    The stage windows partition a single document load:
    container decode, structural parse, derived extraction, then 100.
    """

    decode_window: StageWindow = field(default_factory=lambda: StageWindow(0.0, 50.0))
    parse_window: StageWindow = field(default_factory=lambda: StageWindow(50.0, 70.0))
    extract_window: StageWindow = field(default_factory=lambda: StageWindow(70.0, 90.0))
    failure_mode: BatchFailureMode = BatchFailureMode.SKIP
    chunk_size: int = 64 * 1024  # Container read size per suspension point
