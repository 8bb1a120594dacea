"""DocumentTree: the generic tree a parsed document is made of.

A DocumentTree is one of three explicit variants:

- ScalarNode   a leaf value (text, or None for an absent value)
- SequenceNode an ordered run of nodes (a label that occurs more than once)
- MappingNode  labelled children; attributes sit under the reserved "$" label

Code that walks a tree dispatches on ``node.kind`` rather than testing for
list-ness or dict-ness, since any label may hold either a single node or a
sequence depending on how many times it occurs in the source document.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

from ..constants import ATTRIBUTE_KEY


class TreeKind(Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


Segment = Union[int, str]


class DocumentTree(ABC):
    """Abstract base for the three tree variants.

    Nodes are read-only once constructed.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def kind(self) -> TreeKind:
        """The variant tag of this node."""
        pass

    @abstractmethod
    def children(self) -> Iterator[Tuple[Segment, "DocumentTree"]]:
        """Yield (segment, child) pairs in document order.

        Sequences yield integer indices, mappings yield labels, scalars
        yield nothing.
        """
        pass

    @abstractmethod
    def to_python(self) -> Any:
        """Plain dict/list/str rendering, for diagnostics and JSON dumps."""
        pass


class ScalarNode(DocumentTree):
    __slots__ = ('_value',)

    def __init__(self, value: Optional[str]):
        self._value = value

    @property
    def kind(self) -> TreeKind:
        return TreeKind.SCALAR

    @property
    def value(self) -> Optional[str]:
        return self._value

    def children(self) -> Iterator[Tuple[Segment, DocumentTree]]:
        return iter(())

    def to_python(self) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarNode):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"ScalarNode({self._value!r})"


class SequenceNode(DocumentTree):
    __slots__ = ('_items',)

    def __init__(self, items: Iterable[DocumentTree]):
        self._items = tuple(items)

    @property
    def kind(self) -> TreeKind:
        return TreeKind.SEQUENCE

    @property
    def items(self) -> Tuple[DocumentTree, ...]:
        return self._items

    def children(self) -> Iterator[Tuple[Segment, DocumentTree]]:
        return enumerate(self._items)

    def to_python(self) -> Any:
        return [item.to_python() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DocumentTree]:
        return iter(self._items)

    def __getitem__(self, index: int) -> DocumentTree:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceNode):
            return NotImplemented
        return self._items == other._items

    __hash__ = None

    def __repr__(self) -> str:
        return f"SequenceNode(<{len(self._items)} items>)"


class MappingNode(DocumentTree):
    __slots__ = ('_entries',)

    def __init__(self, entries: Mapping[str, DocumentTree]):
        self._entries = MappingProxyType(dict(entries))

    @property
    def kind(self) -> TreeKind:
        return TreeKind.MAPPING

    @property
    def entries(self) -> Mapping[str, DocumentTree]:
        return self._entries

    def labels(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def get(self, label: str, default: Optional[DocumentTree] = None) -> Optional[DocumentTree]:
        return self._entries.get(label, default)

    def attributes(self) -> Optional["MappingNode"]:
        """The attribute sub-mapping, if this node carries one."""
        attrs = self._entries.get(ATTRIBUTE_KEY)
        if attrs is not None and attrs.kind is TreeKind.MAPPING:
            return attrs
        return None

    def attribute(self, name: str) -> Optional[str]:
        """Value of a single attribute, or None when absent."""
        attrs = self.attributes()
        if attrs is None:
            return None
        node = attrs.get(name)
        if node is None or node.kind is not TreeKind.SCALAR:
            return None
        return node.value

    def children(self) -> Iterator[Tuple[Segment, DocumentTree]]:
        return iter(self._entries.items())

    def to_python(self) -> Any:
        return {label: child.to_python() for label, child in self._entries.items()}

    def __contains__(self, label: object) -> bool:
        return label in self._entries

    def __getitem__(self, label: str) -> DocumentTree:
        return self._entries[label]

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingNode):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    __hash__ = None

    def __repr__(self) -> str:
        return f"MappingNode({list(self._entries)!r})"


def from_python(value: Any) -> DocumentTree:
    """Build a DocumentTree from plain dicts, lists and scalars.

    Numbers and booleans are stored as their string form, matching what a
    parsed document would carry.
    """
    if isinstance(value, DocumentTree):
        return value
    if isinstance(value, Mapping):
        return MappingNode({str(k): from_python(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return SequenceNode(from_python(v) for v in value)
    if value is None or isinstance(value, str):
        return ScalarNode(value)
    if isinstance(value, bool):
        return ScalarNode("true" if value else "false")
    return ScalarNode(str(value))
