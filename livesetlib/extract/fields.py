"""Schema-tolerant field accessors."""

import json
import logging
import math
import re
from typing import Any, Optional, Sequence

from ..constants import TEMPO_NOT_FOUND, VALUE_ATTRIBUTE
from ..errors import MalformedNodeError, VersionParseError
from ..models import VersionInfo
from ..tree import DocumentTree, TreeKind
from .lookups import PathLookup, SchemaLookup, first_match

logger = logging.getLogger(__name__)

# "<app name> <major>.<minor>[.<patch>]", e.g. "Ableton Live 11.3.21"
_VERSION_PATTERN = re.compile(r"([a-zA-Z ]+) ([0-9]+)\.(\d+)(?:\.(\d+))?")


def serialize(node: Optional[DocumentTree]) -> str:
    """Readable JSON form of a node for error messages."""
    return json.dumps(node.to_python() if node is not None else None, indent=2)


def child(node: Optional[DocumentTree], label: str) -> Optional[DocumentTree]:
    """Child of a mapping node by label; None for absent labels or non-mappings."""
    if node is None or node.kind is not TreeKind.MAPPING:
        return None
    return node.get(label)


def unwrap_attribute_value(node: Optional[DocumentTree]) -> str:
    """Read the ``Value`` attribute most leaf facts are wrapped in.

    Raises:
        MalformedNodeError: If the node has no ``$.Value`` attribute
    """
    if node is not None and node.kind is TreeKind.MAPPING:
        attrs = node.attributes()
        if attrs is not None:
            value = attrs.get(VALUE_ATTRIBUTE)
            if value is not None and value.kind is TreeKind.SCALAR and value.value is not None:
                return value.value
    raise MalformedNodeError(serialize(node))


def parse_version_string(creator: Any) -> VersionInfo:
    """Parse a Creator string such as ``"Ableton Live 12.3.2"``.

    The patch component is optional and defaults to 0.

    Raises:
        VersionParseError: If no version pattern is found
    """
    if not isinstance(creator, str):
        raise VersionParseError(creator)
    match = _VERSION_PATTERN.search(creator)
    if match is None:
        raise VersionParseError(creator)
    app, major, minor, patch = match.groups()
    return VersionInfo(
        app=app.strip(),
        major=int(major),
        minor=int(minor),
        patch=int(patch) if patch is not None else 0,
    )


def resolve_version(tree: DocumentTree) -> VersionInfo:
    """Version of the application that wrote the document."""
    creator = tree.attribute("Creator") if tree.kind is TreeKind.MAPPING else None
    return parse_version_string(creator)


# Live 12 renamed MasterTrack to MainTrack; the older name is tried first.
TEMPO_LOOKUPS: Sequence[SchemaLookup] = (
    PathLookup("master-track", "LiveSet.MasterTrack.DeviceChain.Mixer.Tempo.Manual",
              unwrap_attribute_value),
    PathLookup("main-track", "LiveSet.MainTrack.DeviceChain.Mixer.Tempo.Manual",
              unwrap_attribute_value),
)


def format_tempo(raw: str) -> str:
    """Render a raw tempo value with exactly two decimals.

    Raises:
        ValueError: If raw is not numeric
    """
    value = float(raw)
    if not math.isfinite(value):
        return TEMPO_NOT_FOUND
    return f"{value:.2f}"


def resolve_tempo(tree: Optional[DocumentTree], lookups: Sequence[SchemaLookup] = TEMPO_LOOKUPS) -> str:
    """Tempo as a two-decimal string, or ``"NaN"`` when no location has one.

    Never raises: a missing or malformed tempo is reported, not fatal.
    """
    result = first_match(lookups, tree, tolerate=(MalformedNodeError,))
    if not result.found:
        logger.debug("No tempo found at any known schema location")
        return TEMPO_NOT_FOUND
    try:
        return format_tempo(result.value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric tempo %r found by lookup %s", result.value, result.source)
        return TEMPO_NOT_FOUND
