"""Label search over a DocumentTree.

Both searches walk the tree depth-first, pre-order, with an explicit work
list instead of recursion so arbitrarily deep documents cannot exhaust the
call stack. A node is recorded as soon as its label matches and the walk
still descends into it, so matches nested inside matches are all reported.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .node import DocumentTree, Segment, TreeKind

_MISSING = object()
_PATH_TOKEN = re.compile(r"\[(\d+)\]|\.?((?:[^.\[\]\\]|\\.)+)")
_SPECIAL = re.compile(r"([.\[\]\\])")
_ESCAPED = re.compile(r"\\(.)")


@dataclass(frozen=True)
class KeyPathMatch:
    """A node located by label, with its path from the document root."""

    key: str
    path: str
    value: DocumentTree


def escape_label(label: str) -> str:
    """Backslash-escape the characters that carry meaning in a path."""
    return _SPECIAL.sub(r"\\\1", label)


def _join(path: str, segment: Segment) -> str:
    if isinstance(segment, int):
        return f"{path}[{segment}]"
    label = escape_label(segment)
    return f"{path}.{label}" if path else label


def find_by_keys(tree: Optional[DocumentTree], target_keys: Iterable[str]) -> List[KeyPathMatch]:
    """Find every node whose label is one of target_keys.

    Args:
        tree: Tree to search (None yields no matches)
        target_keys: Labels to look for

    Returns:
        Matches in pre-order document order. Paths use ``.label`` for
        mapping children and ``[i]`` for sequence items; ``.``, ``[``, ``]``
        and ``\\`` inside a label are backslash-escaped.
    """
    keys = frozenset(target_keys)
    results: List[KeyPathMatch] = []
    if tree is None:
        return results

    # Work items are (label, node, path); label is None for sequence items
    # and for the root, which can never match.
    stack: List[Tuple[Optional[str], DocumentTree, str]] = [(None, tree, "")]

    while stack:
        label, node, path = stack.pop()
        if node is None:
            continue

        if label is not None and label in keys:
            results.append(KeyPathMatch(key=label, path=path, value=node))

        if node.kind is TreeKind.SCALAR:
            continue

        pending = []
        if node.kind is TreeKind.SEQUENCE:
            for index, child in node.children():
                pending.append((None, child, _join(path, index)))
        elif node.kind is TreeKind.MAPPING:
            for child_label, child in node.children():
                pending.append((child_label, child, _join(path, child_label)))

        # Reversed so the first child is popped first
        stack.extend(reversed(pending))

    return results


def find_paths(tree: Optional[DocumentTree], target_key: str) -> List[str]:
    """Paths of every node labelled target_key, in the same order as find_by_keys."""
    return [match.path for match in find_by_keys(tree, (target_key,))]


def parse_path(path: str) -> List[Segment]:
    """Split a dotted/bracketed path into label and index segments.

    Raises:
        ValueError: If the path is not in the form produced by find_by_keys
    """
    segments: List[Segment] = []
    position = 0
    for token in _PATH_TOKEN.finditer(path):
        if token.start() != position:
            break
        index, label = token.groups()
        segments.append(int(index) if index is not None else _ESCAPED.sub(r"\1", label))
        position = token.end()
    if position != len(path):
        raise ValueError(f"Malformed tree path: {path!r}")
    return segments


def resolve_path(tree: DocumentTree, path: Union[str, List[Segment]], default=_MISSING):
    """Navigate to the node at path.

    Args:
        tree: Tree to navigate
        path: A path string as produced by find_by_keys, or its segments
        default: Returned when the path does not exist; if omitted a
            LookupError is raised instead

    Returns:
        The node at path (the tree itself for an empty path)
    """
    segments = parse_path(path) if isinstance(path, str) else path
    node = tree
    for segment in segments:
        child = None
        if isinstance(segment, int) and node is not None and node.kind is TreeKind.SEQUENCE:
            if 0 <= segment < len(node):
                child = node[segment]
        elif isinstance(segment, str) and node is not None and node.kind is TreeKind.MAPPING:
            child = node.get(segment)
        if child is None:
            if default is _MISSING:
                raise LookupError(f"No node at segment {segment!r} of {path!r}")
            return default
        node = child
    return node


def as_sequence(node: Optional[DocumentTree]) -> Tuple[DocumentTree, ...]:
    """Items of a label that may occur once or many times.

    A SequenceNode yields its items, any other node is a sequence of one,
    and None is empty.
    """
    if node is None:
        return ()
    if node.kind is TreeKind.SEQUENCE:
        return node.items
    return (node,)
