"""Per-track inventory and document-wide sample extraction.

Malformed plugin and sample nodes are skipped with a warning so one odd
descriptor does not lose the rest of the document. A malformed track name
is fatal.
"""

import logging
from typing import Dict, FrozenSet, Optional, Tuple

from ..constants import ATTRIBUTE_KEY
from ..errors import MalformedNodeError
from ..models import PluginDetail, PluginKind, SampleInfo, TrackDeviceInfo
from ..tree import DocumentTree, TreeKind, as_sequence, find_by_keys, resolve_path
from .descriptors import classify_plugin, classify_sample
from .fields import unwrap_attribute_value

logger = logging.getLogger(__name__)

TRACKS_PATH = "LiveSet.Tracks"
PLUGIN_KEY = "PluginDesc"
DEVICES_KEY = "Devices"
SAMPLE_KEY = "SampleRef"


def tracks_node(tree: DocumentTree) -> Optional[DocumentTree]:
    node = resolve_path(tree, TRACKS_PATH, default=None)
    if node is None or node.kind is not TreeKind.MAPPING:
        return None
    return node


def count_tracks(tree: DocumentTree) -> Dict[str, int]:
    """Number of tracks of each type (AudioTrack, MidiTrack, ReturnTrack, ...)."""
    counts: Dict[str, int] = {}
    tracks = tracks_node(tree)
    if tracks is None:
        return counts
    for track_type, node in tracks.children():
        if track_type == ATTRIBUTE_KEY:
            continue
        counts[track_type] = len(as_sequence(node))
    return counts


def track_devices(track: DocumentTree) -> FrozenSet[str]:
    """Device type names in every device chain on the track, racks included."""
    names = set()
    for match in find_by_keys(track, (DEVICES_KEY,)):
        if match.value.kind is TreeKind.MAPPING:
            names.update(label for label in match.value.labels() if label != ATTRIBUTE_KEY)
    return frozenset(names)


def track_plugins(track: DocumentTree, where: str = "") -> Tuple[Tuple[PluginKind, PluginDetail], ...]:
    plugins = []
    for match in find_by_keys(track, (PLUGIN_KEY,)):
        try:
            plugins.append(classify_plugin(match.value))
        except MalformedNodeError as e:
            logger.warning("Skipping malformed plugin descriptor at %s%s: %s", where, match.path, e)
    return tuple(plugins)


def extract_tracks(tree: DocumentTree) -> Tuple[TrackDeviceInfo, ...]:
    """Device and plugin inventory of every track, in document order.

    Raises:
        MalformedNodeError: If a track has no readable name
    """
    tracks = tracks_node(tree)
    if tracks is None:
        return ()
    infos = []
    for track_type, node in tracks.children():
        if track_type == ATTRIBUTE_KEY:
            continue
        for index, track in enumerate(as_sequence(node)):
            where = f"{TRACKS_PATH}.{track_type}[{index}]."
            name = unwrap_attribute_value(resolve_path(track, "Name.EffectiveName", default=None))
            infos.append(TrackDeviceInfo(
                name=name,
                track_type=track_type,
                devices=track_devices(track),
                plugins=track_plugins(track, where),
            ))
    return tuple(infos)


def extract_samples(tree: DocumentTree) -> Tuple[SampleInfo, ...]:
    """Every sample reference in the document, in document order."""
    samples = []
    for match in find_by_keys(tree, (SAMPLE_KEY,)):
        try:
            samples.append(classify_sample(match.value))
        except MalformedNodeError as e:
            logger.warning("Skipping malformed sample reference at %s: %s", match.path, e)
    return tuple(samples)
