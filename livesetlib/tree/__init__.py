"""Generic tree model and label search for parsed documents."""

from .node import (
    DocumentTree,
    MappingNode,
    ScalarNode,
    SequenceNode,
    TreeKind,
    from_python,
)
from .query import (
    KeyPathMatch,
    as_sequence,
    escape_label,
    find_by_keys,
    find_paths,
    parse_path,
    resolve_path,
)

__all__ = [
    'DocumentTree',
    'MappingNode',
    'ScalarNode',
    'SequenceNode',
    'TreeKind',
    'from_python',
    'KeyPathMatch',
    'as_sequence',
    'escape_label',
    'find_by_keys',
    'find_paths',
    'parse_path',
    'resolve_path',
]
