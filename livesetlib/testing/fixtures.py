"""Builders for fixture documents and project folders.

build_live_set_xml renders a small but structurally faithful Live Set:
an ``Ableton`` root carrying the Creator attribute, a ``LiveSet`` with
``Tracks``, per-track device chains with plugin descriptors and sample
references, and a tempo under either the MasterTrack or the MainTrack
location.

Example:
    xml = build_live_set_xml(
        tracks=[TrackSpec("Drums", devices=["Eq8"], samples=[SampleSpec(path)])],
        tempo="120",
    )
    write_document(tmp_path / "Song.als", xml)
"""

import gzip
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union
from xml.sax.saxutils import quoteattr

from ..constants import DOCUMENT_EXTENSION, PROJECT_INFO_FOLDER, PROJECT_SUFFIX

DEFAULT_CREATOR = "Ableton Live 11.3.21"


@dataclass
class PluginSpec:
    """A plugin descriptor. kind is "AU", "VST", "VST3" or anything else for
    an unrecognised format."""

    kind: str
    name: str
    manufacturer: str = ""
    path: str = ""


@dataclass
class SampleSpec:
    path: str
    size: Optional[Union[int, str]] = 0


@dataclass
class TrackSpec:
    name: str
    track_type: str = "AudioTrack"
    devices: List[str] = field(default_factory=list)
    plugins: List[PluginSpec] = field(default_factory=list)
    samples: List[SampleSpec] = field(default_factory=list)


def _value(tag: str, value) -> str:
    return f"<{tag} Value={quoteattr(str(value))} />"


def _plugin_xml(plugin: PluginSpec) -> str:
    if plugin.kind == "AU":
        info = (f"<AuPluginInfo>{_value('Name', plugin.name)}"
                f"{_value('Manufacturer', plugin.manufacturer)}</AuPluginInfo>")
    elif plugin.kind == "VST":
        info = (f"<VstPluginInfo>{_value('PlugName', plugin.name)}"
                f"{_value('Path', plugin.path)}</VstPluginInfo>")
    elif plugin.kind == "VST3":
        info = f"<Vst3PluginInfo>{_value('Name', plugin.name)}</Vst3PluginInfo>"
    else:
        info = f"<{plugin.kind}PluginInfo>{_value('Name', plugin.name)}</{plugin.kind}PluginInfo>"
    return f"<PluginDevice><PluginDesc>{info}</PluginDesc></PluginDevice>"


def _sample_xml(sample: SampleSpec) -> str:
    size = "" if sample.size is None else _value("OriginalFileSize", sample.size)
    return (f"<OriginalSimpler><SampleRef><FileRef>{_value('Path', sample.path)}{size}"
            f"</FileRef></SampleRef></OriginalSimpler>")


def _track_xml(index: int, track: TrackSpec) -> str:
    devices = "".join(f"<{device} Id=\"{n}\" />" for n, device in enumerate(track.devices))
    devices += "".join(_plugin_xml(plugin) for plugin in track.plugins)
    devices += "".join(_sample_xml(sample) for sample in track.samples)
    return (
        f"<{track.track_type} Id=\"{index}\">"
        f"<Name>{_value('EffectiveName', track.name)}</Name>"
        f"<DeviceChain><DeviceChain><Devices>{devices}</Devices></DeviceChain></DeviceChain>"
        f"</{track.track_type}>"
    )


def build_live_set_xml(
    tracks: Sequence[TrackSpec] = (),
    tempo: Optional[str] = "120",
    creator: Optional[str] = DEFAULT_CREATOR,
    main_track: bool = False
) -> str:
    """Render a Live Set document.

    Args:
        tracks: Tracks in document order
        tempo: Raw tempo value; None leaves the tempo out entirely
        creator: Creator attribute; None leaves it out
        main_track: Put the tempo under MainTrack (Live 12) instead of MasterTrack
    """
    creator_attr = f" Creator={quoteattr(creator)}" if creator is not None else ""
    track_xml = "".join(_track_xml(i, track) for i, track in enumerate(tracks))
    master_label = "MainTrack" if main_track else "MasterTrack"
    if tempo is not None:
        mixer = f"<Mixer><Tempo>{_value('Manual', tempo)}</Tempo></Mixer>"
    else:
        mixer = "<Mixer><Volume><Manual Value=\"1\" /></Volume></Mixer>"
    return (
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>\n"
        f"<Ableton MajorVersion=\"5\"{creator_attr}>"
        "<LiveSet>"
        f"<Tracks>{track_xml}</Tracks>"
        f"<{master_label}><DeviceChain>{mixer}</DeviceChain></{master_label}>"
        "</LiveSet>"
        "</Ableton>"
    )


def write_document(path: Union[str, Path], xml: str, compress: bool = True) -> Path:
    """Write xml to path, gzip-compressed unless compress is False."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = xml.encode("utf-8")
    if compress:
        # mtime=0 keeps the bytes, and so the hash, stable across runs
        data = gzip.compress(data, mtime=0)
    path.write_bytes(data)
    return path


def make_project(
    root: Union[str, Path],
    name: str,
    documents: Iterable[str] = ("Song",),
    with_info: bool = True,
    suffix: bool = True,
    xml: Optional[str] = None
) -> Path:
    """Create a project folder under root.

    Args:
        root: Parent directory
        name: Project name without the suffix
        documents: Document base names to create (without extension)
        with_info: Create the project-info folder
        suffix: Append the project suffix to the folder name
        xml: Document content (defaults to an empty Live Set)

    Returns:
        Path of the project folder
    """
    folder = Path(root) / (name + PROJECT_SUFFIX if suffix else name)
    folder.mkdir(parents=True, exist_ok=True)
    content = xml if xml is not None else build_live_set_xml()
    for document in documents:
        write_document(folder / (document + DOCUMENT_EXTENSION), content)
    if with_info:
        (folder / PROJECT_INFO_FOLDER).mkdir(exist_ok=True)
    return folder
