"""XML text to DocumentTree conversion.

The tree shape follows the xml2js convention used by most tooling around
these documents:

- the root element's content is returned without a wrapping label
- attributes live under "$", trimmed text beside attributes or children under "_"
- an element with neither attributes nor children becomes its trimmed text
- a tag occurring once is a single node, a repeated tag a SequenceNode
"""

import xml.etree.ElementTree as ET
from typing import Dict, List

from ..constants import ATTRIBUTE_KEY, TEXT_KEY
from ..errors import TreeParseError
from ..tree import DocumentTree, MappingNode, ScalarNode, SequenceNode


def parse_document(text: str) -> DocumentTree:
    """Parse XML text into a DocumentTree.

    Raises:
        TreeParseError: With the parser's message if the text is not well-formed
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise TreeParseError(str(e)) from e
    return element_to_tree(root)


def element_to_tree(root: ET.Element) -> DocumentTree:
    """Convert an element and its descendants, without recursion."""
    converted: Dict[int, DocumentTree] = {}
    stack = [(root, False)]

    while stack:
        element, expanded = stack.pop()
        if not expanded:
            stack.append((element, True))
            stack.extend((child, False) for child in element)
            continue
        children = [converted.pop(id(child)) for child in element]
        converted[id(element)] = _convert(element, children)

    return converted[id(root)]


def _convert(element: ET.Element, children: List[DocumentTree]) -> DocumentTree:
    text = (element.text or "").strip()
    if not element.attrib and not children:
        return ScalarNode(text)

    entries: Dict[str, DocumentTree] = {}
    if element.attrib:
        entries[ATTRIBUTE_KEY] = MappingNode(
            {name: ScalarNode(value) for name, value in element.attrib.items()}
        )
    if text:
        entries[TEXT_KEY] = ScalarNode(text)

    grouped: Dict[str, List[DocumentTree]] = {}
    for child_element, node in zip(element, children):
        grouped.setdefault(child_element.tag, []).append(node)
    for tag, nodes in grouped.items():
        entries[tag] = nodes[0] if len(nodes) == 1 else SequenceNode(nodes)

    return MappingNode(entries)
