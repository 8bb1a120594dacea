"""Ordered, named schema lookups.

Facts that move between schema revisions (or that come in several
flavours, like plugin descriptors) are located by trying a list of lookups
in priority order. Supporting a new revision means appending a lookup.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple, Type

from ..tree import DocumentTree, resolve_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupResult:
    found: bool
    value: Any = None
    source: Optional[str] = None


NOT_FOUND = LookupResult(found=False)


class SchemaLookup(ABC):
    """Looks for one fact at one schema location."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def lookup(self, node: DocumentTree) -> LookupResult:
        """Return a found result carrying the fact, or NOT_FOUND."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class PathLookup(SchemaLookup):
    """Finds the node at a fixed path and extracts a value from it."""

    def __init__(self, name: str, path: str, extract: Callable[[DocumentTree], Any]):
        super().__init__(name)
        self.path = path
        self.extract = extract

    def lookup(self, node: DocumentTree) -> LookupResult:
        target = resolve_path(node, self.path, default=None)
        if target is None:
            return NOT_FOUND
        return LookupResult(found=True, value=self.extract(target), source=self.name)


def first_match(
    lookups: Iterable[SchemaLookup],
    node: Optional[DocumentTree],
    tolerate: Tuple[Type[BaseException], ...] = ()
) -> LookupResult:
    """Run lookups in order and return the first found result.

    Args:
        lookups: Lookups in priority order
        node: Node to search (None finds nothing)
        tolerate: Exception types that mark a lookup as not found instead
            of propagating

    Returns:
        The first found LookupResult, or NOT_FOUND
    """
    if node is None:
        return NOT_FOUND
    for candidate in lookups:
        try:
            result = candidate.lookup(node)
        except tolerate as e:
            logger.debug("Lookup %s failed: %s", candidate.name, e)
            continue
        if result.found:
            return result
    return NOT_FOUND
