"""Testing utilities for livesetlib and its consumers.

Documents are generated on the fly instead of shipping binary fixtures.
"""

from .fixtures import (
    DEFAULT_CREATOR,
    PluginSpec,
    SampleSpec,
    TrackSpec,
    build_live_set_xml,
    make_project,
    write_document,
)

__all__ = [
    "DEFAULT_CREATOR",
    "PluginSpec",
    "SampleSpec",
    "TrackSpec",
    "build_live_set_xml",
    "make_project",
    "write_document",
]
