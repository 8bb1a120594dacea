"""Classifiers for plugin descriptors and sample references."""

import re
from typing import List, Optional, Tuple

from ..constants import EXTERNAL_SAMPLE, PROJECT_SUFFIX
from ..errors import MalformedNodeError
from ..models import PluginDetail, PluginKind, SampleInfo
from ..tree import DocumentTree, TreeKind
from .fields import child, serialize, unwrap_attribute_value
from .lookups import PathLookup, first_match

_PATH_SEPARATORS = re.compile(r"[\\/]")
SAMPLES_FOLDER = "Samples"


def _au_plugin(info: DocumentTree) -> Tuple[PluginKind, PluginDetail]:
    return PluginKind.AU, PluginDetail(
        name=unwrap_attribute_value(child(info, "Name")),
        manufacturer=unwrap_attribute_value(child(info, "Manufacturer")),
        path=None,
    )


def _vst_plugin(info: DocumentTree) -> Tuple[PluginKind, PluginDetail]:
    return PluginKind.VST, PluginDetail(
        name=unwrap_attribute_value(child(info, "PlugName")),
        manufacturer=None,
        path=unwrap_attribute_value(child(info, "Path")),
    )


def _vst3_plugin(info: DocumentTree) -> Tuple[PluginKind, PluginDetail]:
    return PluginKind.VST3, PluginDetail(
        name=unwrap_attribute_value(child(info, "Name")),
        manufacturer=None,
        path=None,
    )


PLUGIN_LOOKUPS = (
    PathLookup("AuPluginInfo", "AuPluginInfo", _au_plugin),
    PathLookup("VstPluginInfo", "VstPluginInfo", _vst_plugin),
    PathLookup("Vst3PluginInfo", "Vst3PluginInfo", _vst3_plugin),
)

UNKNOWN_PLUGIN = (PluginKind.UNKNOWN, PluginDetail())


def classify_plugin(descriptor: Optional[DocumentTree]) -> Tuple[PluginKind, PluginDetail]:
    """Identify the plugin format of a PluginDesc node and extract its details.

    Formats without a lookup (CLAP, for instance) come back as
    PluginKind.UNKNOWN with an empty detail.

    Raises:
        MalformedNodeError: If a recognised format child lacks a field it must have
    """
    if descriptor is None or descriptor.kind is not TreeKind.MAPPING:
        return UNKNOWN_PLUGIN
    result = first_match(PLUGIN_LOOKUPS, descriptor)
    return result.value if result.found else UNKNOWN_PLUGIN


def _segment_from_end(parts: List[str], offset: int) -> Optional[str]:
    if offset > len(parts):
        return None
    return parts[-offset]


def classify_sample_path(path: str) -> str:
    """Category of a sample file from its position relative to a project folder.

    Project samples live at ``<X Project>/Samples/<Category>/<file>`` (or
    one level deeper under an extra ``Samples`` container). Those come back
    as the lower-cased category; anything else is ``"external"``.
    """
    parts = _PATH_SEPARATORS.split(path)
    candidate = _segment_from_end(parts, 4)
    if candidate == SAMPLES_FOLDER:
        candidate = _segment_from_end(parts, 5)
    if candidate is not None and candidate.endswith(PROJECT_SUFFIX):
        return parts[-2].lower()
    return EXTERNAL_SAMPLE


def classify_sample(sample_ref: Optional[DocumentTree]) -> SampleInfo:
    """Build SampleInfo from a SampleRef node.

    Raises:
        MalformedNodeError: If the file reference has no path, or a size
            that is not a non-negative integer
    """
    file_ref = child(sample_ref, "FileRef")
    path = unwrap_attribute_value(child(file_ref, "Path"))

    size_node = child(file_ref, "OriginalFileSize")
    size = 0
    if size_node is not None:
        raw_size = unwrap_attribute_value(size_node)
        try:
            size = int(raw_size)
        except ValueError:
            raise MalformedNodeError(serialize(size_node), f"Invalid sample size: {raw_size!r}")
        if size < 0:
            raise MalformedNodeError(serialize(size_node), f"Invalid sample size: {raw_size!r}")

    return SampleInfo(path=path, size_bytes=size, classification=classify_sample_path(path))
