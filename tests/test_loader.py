"""
End-to-end tests for document and project loading.
"""

import hashlib
import logging
from pathlib import Path

import pytest

from livesetlib.aio import ProgressRecorder, load_live_set, load_project, load_project_directory, open_project
from livesetlib.config import BatchFailureMode, LoadConfig
from livesetlib.errors import (
    ContainerDecodeError,
    DocumentLoadError,
    InvalidProjectError,
    MalformedNodeError,
    TreeParseError,
    VersionParseError,
)
from livesetlib.aio import loader
from livesetlib.io import DecodeEvent, clear_digest_cache
from livesetlib.models import LiveProject, PluginKind, VersionInfo
from livesetlib.testing import (
    PluginSpec,
    SampleSpec,
    TrackSpec,
    build_live_set_xml,
    make_project,
    write_document,
)

FIXTURE_TRACKS = [
    TrackSpec("Drums", devices=["Eq8"],
              samples=[SampleSpec("/m/Song Project/Samples/Recorded/kick.wav", 4096),
                       SampleSpec("/Library/Loops/Perc/Shaker/shaker.wav", 512)]),
    TrackSpec("Lead", track_type="MidiTrack",
              plugins=[PluginSpec("VST3", "Diva"), PluginSpec("AU", "Pro-Q 3", manufacturer="FabFilter")]),
    TrackSpec("Pad", track_type="MidiTrack", plugins=[PluginSpec("VST3", "Diva")]),
    TrackSpec("Delay", track_type="ReturnTrack"),
]


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_digest_cache()
    yield
    clear_digest_cache()


@pytest.fixture
def document(tmp_path):
    xml = build_live_set_xml(tracks=FIXTURE_TRACKS, tempo="104.5", creator="Ableton Live 11.3.21")
    return write_document(tmp_path / "Song.als", xml)


class TestLoadLiveSet:

    @pytest.mark.asyncio
    async def test_extracted_info(self, document):
        live_set = await load_live_set(document)
        info = live_set.info

        assert info.name == "Song.als"
        assert info.location == str(document)
        assert info.version == VersionInfo("Ableton Live", 11, 3, 21)
        assert info.tempo == "104.50"
        assert info.track_count == 3
        assert dict(info.track_counts) == {"AudioTrack": 1, "MidiTrack": 2, "ReturnTrack": 1}
        assert [t.name for t in info.tracks] == ["Drums", "Lead", "Pad", "Delay"]
        assert [s.classification for s in info.samples] == ["recorded", "external"]
        assert info.sha256 == hashlib.sha256(document.read_bytes()).hexdigest()
        assert info.size == document.stat().st_size
        assert [kind for kind, _ in info.unique_plugins()] == [PluginKind.VST3, PluginKind.AU]

    @pytest.mark.asyncio
    async def test_repeated_loads_identical(self, document):
        first = await load_live_set(document)
        clear_digest_cache()
        second = await load_live_set(document)
        assert first.info == second.info
        assert first.info.to_dict() == second.info.to_dict()

    @pytest.mark.asyncio
    async def test_info_is_immutable(self, document):
        live_set = await load_live_set(document)
        with pytest.raises(AttributeError):
            live_set.info.tempo = "1.00"
        with pytest.raises(TypeError):
            live_set.info.track_counts["AudioTrack"] = 9

    @pytest.mark.asyncio
    async def test_main_track_tempo(self, tmp_path):
        path = write_document(tmp_path / "New.als",
                              build_live_set_xml(tempo="199.99", main_track=True,
                                                 creator="Ableton Live 12.1"))
        info = (await load_live_set(path)).info
        assert info.tempo == "199.99"
        assert info.version.patch == 0

    @pytest.mark.asyncio
    async def test_missing_tempo_is_nan(self, tmp_path):
        path = write_document(tmp_path / "NoTempo.als", build_live_set_xml(tempo=None))
        assert (await load_live_set(path)).info.tempo == "NaN"

    @pytest.mark.asyncio
    async def test_uncompressed_document(self, tmp_path):
        path = write_document(tmp_path / "Plain.als", build_live_set_xml(tracks=FIXTURE_TRACKS), compress=False)
        assert (await load_live_set(path)).info.track_count == 3

    @pytest.mark.asyncio
    async def test_to_dict(self, document):
        data = (await load_live_set(document)).info.to_dict()
        assert data["name"] == "Song.als"
        assert data["tempo"] == "104.50"
        assert data["trackCount"] == 3
        assert data["version"] == {"app": "Ableton Live", "major": 11, "minor": 3, "patch": 21}
        assert data["samples"][0] == {
            "path": "/m/Song Project/Samples/Recorded/kick.wav", "size": 4096, "type": "recorded",
        }
        assert data["tracks"][1]["plugins"][0] == {
            "kind": "VST3", "name": "Diva", "manufacturer": None, "path": None,
        }


class TestLoadProgress:

    @pytest.mark.asyncio
    async def test_stage_order(self, document):
        recorder = ProgressRecorder()
        await load_live_set(document, recorder, LoadConfig(chunk_size=256))
        stages = recorder.stages()

        assert stages[0] == "reading-file"
        for stage in ("reading", "unzipping", "processing", "parsing-xml", "parsing-complete",
                      "samples-extracted", "tracks-extracted"):
            assert stage in stages
        assert stages.index("parsing-xml") < stages.index("parsing-complete") \
            < stages.index("samples-extracted") < stages.index("tracks-extracted")
        assert stages[-1] == "complete"
        assert "error" not in stages

    @pytest.mark.asyncio
    async def test_percent_windows(self, document):
        recorder = ProgressRecorder()
        await load_live_set(document, recorder)
        by_stage = {e.stage: e.percent for e in recorder.events}

        percents = recorder.percents()
        assert percents == sorted(percents)
        assert all(0.0 <= p <= 100.0 for p in percents)
        decode_percents = [e.percent for e in recorder.events if e.stage == "processing"]
        assert all(p < 50.0 for p in decode_percents)
        assert by_stage["parsing-xml"] == 50.0
        assert by_stage["parsing-complete"] == 70.0
        assert by_stage["samples-extracted"] == 80.0
        assert by_stage["tracks-extracted"] == 90.0
        assert by_stage["complete"] == 100.0

    @pytest.mark.asyncio
    async def test_error_event_before_failure(self, tmp_path):
        path = tmp_path / "Corrupt.als"
        path.write_bytes(b"\x1f\x8b" + b"not gzip at all" * 4)
        recorder = ProgressRecorder()
        with pytest.raises(ContainerDecodeError):
            await load_live_set(path, recorder)
        assert recorder.stages()[-1] == "error"
        assert "complete" not in recorder.stages()


class TestLoadFailures:

    @pytest.mark.asyncio
    async def test_decode_stream_closed_on_error(self, document, monkeypatch):
        closed = []

        async def failing_stream(path, chunk_size):
            try:
                yield DecodeEvent(stage="reading", percent=0.0, path=path)
                yield DecodeEvent(stage="error", error="corrupt", path=path)
                yield DecodeEvent(stage="complete", percent=100.0, data="<Ableton />", path=path)
            finally:
                closed.append(path)

        monkeypatch.setattr(loader, "decode_streaming", failing_stream)
        with pytest.raises(ContainerDecodeError):
            await load_live_set(document)
        assert closed == [str(document)]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ContainerDecodeError):
            await load_live_set(tmp_path / "missing.als")

    @pytest.mark.asyncio
    async def test_malformed_xml(self, tmp_path):
        path = write_document(tmp_path / "Bad.als", "<Ableton><LiveSet></Ableton>")
        with pytest.raises(TreeParseError):
            await load_live_set(path)

    @pytest.mark.asyncio
    async def test_bad_creator(self, tmp_path):
        path = write_document(tmp_path / "Old.als", build_live_set_xml(creator="Unknown"))
        with pytest.raises(VersionParseError):
            await load_live_set(path)

    @pytest.mark.asyncio
    async def test_malformed_track_name(self, tmp_path):
        xml = build_live_set_xml(tracks=[TrackSpec("X")]).replace('Value="X"', "")
        path = write_document(tmp_path / "Odd.als", xml)
        with pytest.raises(MalformedNodeError):
            await load_live_set(path)

    @pytest.mark.asyncio
    async def test_malformed_plugin_does_not_fail_load(self, tmp_path, caplog):
        xml = build_live_set_xml(tracks=[
            TrackSpec("Synth", plugins=[PluginSpec("VST", "Serum", path="/p")]),
        ]).replace('<PlugName Value="Serum" />', "")
        path = write_document(tmp_path / "Odd.als", xml)
        with caplog.at_level(logging.WARNING):
            info = (await load_live_set(path)).info
        assert info.tracks[0].plugins == ()
        assert "Skipping malformed plugin descriptor" in caplog.text


class TestProjects:

    @pytest.fixture
    def project_dir(self, tmp_path):
        folder = make_project(tmp_path, "Album", documents=("One", "Two", "Three"),
                              xml=build_live_set_xml(tracks=FIXTURE_TRACKS))
        write_document(folder / "Backup" / "One [old].als", build_live_set_xml())
        return folder

    @pytest.mark.asyncio
    async def test_open_project(self, project_dir):
        project = await open_project(project_dir)
        assert project.name == "Album"
        assert project.path == str(project_dir)
        assert sorted(Path(p).name for p in project.document_paths) == [
            "One.als", "Three.als", "Two.als",
        ]

    @pytest.mark.asyncio
    async def test_open_invalid_project(self, tmp_path):
        folder = make_project(tmp_path, "Empty", documents=(), with_info=False)
        with pytest.raises(InvalidProjectError) as exc_info:
            await open_project(folder)
        assert len(exc_info.value.result.errors) == 2
        assert "No .als files found in directory" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_load_all_documents(self, project_dir):
        project = await open_project(project_dir)
        recorder = ProgressRecorder()
        result = await load_project(project, recorder)

        assert result.ok
        assert [s.path for s in result.live_sets] == list(project.document_paths)
        assert all(s.info.track_count == 3 for s in result.live_sets)

        batch = [e for e in recorder.events if e.stage == "loading-sets"]
        assert [e.completed for e in batch] == [0, 1, 2, 3]
        assert [e.percent for e in batch] == pytest.approx([0.0, 100 / 3, 200 / 3, 100.0])
        assert recorder.stages()[-1] == "complete"
        assert recorder.percents() == sorted(recorder.percents())

    @pytest.mark.asyncio
    async def test_nested_events_attributed(self, project_dir):
        project = await open_project(project_dir)
        recorder = ProgressRecorder()
        await load_project(project, recorder)

        nested = [e for e in recorder.events if e.stage == "set-progress"]
        assert {e.path for e in nested} == set(project.document_paths)
        for event in nested:
            assert event.nested.path == event.path
            assert project.document_paths[event.index] == event.path

        # documents are loaded one at a time, in discovery order
        order = []
        for event in nested:
            if not order or order[-1] != event.path:
                order.append(event.path)
        assert order == list(project.document_paths)

    @pytest.mark.asyncio
    async def test_skip_failed_document(self, project_dir, caplog):
        project = await open_project(project_dir)
        broken = project.document_paths[1]
        write_document(broken, "<Ableton><Broken></Ableton>")

        with caplog.at_level(logging.WARNING, logger="livesetlib.aio.loader"):
            result = await load_project(project)

        assert not result.ok
        assert [f.path for f in result.failures] == [broken]
        assert isinstance(result.failures[0].error, TreeParseError)
        assert len(result.live_sets) == 2
        assert broken not in [s.path for s in result.live_sets]
        assert "Skipping" in caplog.text

    @pytest.mark.asyncio
    async def test_abort_on_failed_document(self, project_dir):
        project = await open_project(project_dir)
        broken = project.document_paths[1]
        write_document(broken, "<Ableton><Broken></Ableton>")
        recorder = ProgressRecorder()

        with pytest.raises(DocumentLoadError) as exc_info:
            await load_project(project, recorder, LoadConfig(failure_mode=BatchFailureMode.ABORT))

        assert exc_info.value.path == broken
        assert isinstance(exc_info.value.error, TreeParseError)
        assert recorder.stages()[-1] == "error"
        assert "complete" not in recorder.stages()

    @pytest.mark.asyncio
    async def test_empty_project_completes(self, tmp_path):
        recorder = ProgressRecorder()
        result = await load_project(LiveProject(path=str(tmp_path), name="Empty"), recorder)
        assert result.live_sets == ()
        assert recorder.events[-1].stage == "complete"
        assert recorder.events[-1].percent == 100.0

    @pytest.mark.asyncio
    async def test_load_project_directory(self, project_dir):
        result = await load_project_directory(project_dir)
        assert len(result.live_sets) == 3
