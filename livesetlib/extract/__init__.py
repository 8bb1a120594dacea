"""Metadata extraction from parsed document trees."""

from .lookups import NOT_FOUND, PathLookup, LookupResult, SchemaLookup, first_match
from .fields import (
    TEMPO_LOOKUPS,
    format_tempo,
    parse_version_string,
    resolve_tempo,
    resolve_version,
    unwrap_attribute_value,
)
from .descriptors import (
    PLUGIN_LOOKUPS,
    classify_plugin,
    classify_sample,
    classify_sample_path,
)
from .tracks import count_tracks, extract_samples, extract_tracks

__all__ = [
    'NOT_FOUND',
    'PathLookup',
    'LookupResult',
    'SchemaLookup',
    'first_match',
    'TEMPO_LOOKUPS',
    'format_tempo',
    'parse_version_string',
    'resolve_tempo',
    'resolve_version',
    'unwrap_attribute_value',
    'PLUGIN_LOOKUPS',
    'classify_plugin',
    'classify_sample',
    'classify_sample_path',
    'count_tracks',
    'extract_samples',
    'extract_tracks',
]
