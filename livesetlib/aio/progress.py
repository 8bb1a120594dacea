"""Progress events for document and project loads.

Loads report progress to an explicit sink, a plain callable receiving
ProgressEvent objects in order. Percentages are hints: they never decrease
within one operation, but they are not an exact measure of work done.

A single document load moves through fixed stage windows (see LoadConfig).
A project load advances linearly per completed document and wraps each
document's own events in a ``set-progress`` event carrying its path.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional


@dataclass(frozen=True)
class ProgressEvent:
    stage: str
    percent: Optional[float] = None
    path: Optional[str] = None
    bytes_read: Optional[int] = None
    bytes_total: Optional[int] = None
    completed: Optional[int] = None
    total: Optional[int] = None
    index: Optional[int] = None
    error: Optional[str] = None
    nested: Optional["ProgressEvent"] = None


ProgressSink = Callable[[ProgressEvent], None]


def batch_percent(completed: int, total: int) -> float:
    """Overall percentage of a multi-document load."""
    if total <= 0:
        return 100.0
    return completed / total * 100.0


class ProgressReporter:
    """Sends events to an optional sink, keeping percentages non-decreasing."""

    def __init__(self, sink: Optional[ProgressSink] = None):
        self._sink = sink
        self._last_percent = 0.0

    def emit(self, stage: str, percent: Optional[float] = None, **fields: Any) -> ProgressEvent:
        if percent is not None:
            percent = max(percent, self._last_percent)
            self._last_percent = percent
        event = ProgressEvent(stage=stage, percent=percent, **fields)
        if self._sink is not None:
            self._sink(event)
        return event


class ProgressRecorder:
    """A sink that keeps every event it receives."""

    def __init__(self):
        self.events: List[ProgressEvent] = []

    def __call__(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def stages(self) -> List[str]:
        return [event.stage for event in self.events]

    def percents(self) -> List[float]:
        return [event.percent for event in self.events if event.percent is not None]
