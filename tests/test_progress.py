"""
Tests for progress reporting primitives.
"""

from livesetlib.aio import ProgressEvent, ProgressRecorder, ProgressReporter, batch_percent
from livesetlib.config import StageWindow


class TestProgressReporter:

    def test_delivers_events_in_order(self):
        recorder = ProgressRecorder()
        reporter = ProgressReporter(recorder)
        reporter.emit("a", 10.0)
        reporter.emit("b", 20.0, path="/x")
        assert recorder.stages() == ["a", "b"]
        assert recorder.events[1].path == "/x"

    def test_percent_never_decreases(self):
        recorder = ProgressRecorder()
        reporter = ProgressReporter(recorder)
        reporter.emit("a", 50.0)
        reporter.emit("b", 30.0)
        reporter.emit("c", 60.0)
        assert recorder.percents() == [50.0, 50.0, 60.0]

    def test_events_without_percent(self):
        recorder = ProgressRecorder()
        reporter = ProgressReporter(recorder)
        event = reporter.emit("error", error="boom")
        assert event.percent is None
        assert recorder.percents() == []

    def test_no_sink(self):
        event = ProgressReporter().emit("complete", 100.0)
        assert event == ProgressEvent(stage="complete", percent=100.0)


def test_batch_percent():
    assert batch_percent(0, 4) == 0.0
    assert batch_percent(1, 4) == 25.0
    assert batch_percent(4, 4) == 100.0
    assert batch_percent(0, 0) == 100.0


def test_stage_window_scale():
    window = StageWindow(50.0, 70.0)
    assert window.scale(0.0) == 50.0
    assert window.scale(0.5) == 60.0
    assert window.scale(1.0) == 70.0
    assert window.scale(2.0) == 70.0
    assert window.scale(-1.0) == 50.0
