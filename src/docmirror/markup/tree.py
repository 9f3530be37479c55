"""Generic markup tree for WordprocessingML payloads.

The tree is a tagged variant:

- ``Leaf``: a text value
- ``Sequence``: ordered siblings
- ``Element``: a named node mapping child-element names to one or more
  children, with every child (text leaves included) kept in one ordered
  ``Sequence`` so serialization reproduces the original order.

Element names use Clark notation (``{namespace}local``); ``qn("w:r")`` builds
them from the usual prefixes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Union

from lxml import etree

from docmirror.utils.logging import get_logger

log = get_logger(__name__)

NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "xml": "http://www.w3.org/XML/1998/namespace",
}


def qn(tag: str) -> str:
    """Turn a prefixed tag like ``w:instrText`` into Clark notation."""
    prefix, _, local = tag.partition(":")
    if not local:
        return tag
    return f"{{{NAMESPACES[prefix]}}}{local}"


@dataclass
class Leaf:
    """A text value."""

    text: str


@dataclass
class Sequence:
    """Ordered siblings."""

    items: list[Node] = field(default_factory=list)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Node:
        return self.items[index]

    def append(self, node: Node) -> None:
        self.items.append(node)


@dataclass
class Element:
    """A named, mapping-like node."""

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: Sequence = field(default_factory=Sequence)
    # Namespace declarations made on this element (prefix -> uri)
    nsmap: dict[str | None, str] = field(default_factory=dict)

    def get(self, name: str) -> list[Element]:
        """Return the child elements called ``name``, in document order."""
        return [
            child for child in self.children if isinstance(child, Element) and child.name == name
        ]

    def __contains__(self, name: object) -> bool:
        return any(isinstance(child, Element) and child.name == name for child in self.children)

    def append(self, node: Node) -> None:
        self.children.append(node)


Node = Union[Leaf, Sequence, Element]


@dataclass
class MarkupDocument:
    """A parsed markup payload: the root element plus XML declaration details."""

    root: Element
    standalone: bool | None = None


# =============================================================================
# Traversal
# =============================================================================


def iter_elements(node: Node | None) -> Iterator[Element]:
    """Yield every element under ``node`` depth-first, parents before children.

    An element's children are read only after the element has been yielded,
    so a consumer that mutates them sees its own additions traversed. Each
    sequence is snapshotted before iteration; no node is yielded twice.
    """
    if isinstance(node, Element):
        yield node
        for child in list(node.children):
            yield from iter_elements(child)
    elif isinstance(node, Sequence):
        for item in list(node):
            yield from iter_elements(item)


def walk(node: Node | None, visitor: Callable[[Element], None]) -> None:
    """Call ``visitor`` on every element under ``node`` in pre-order.

    Leaves and sequences are traversed but never passed to the visitor.
    """
    for element in iter_elements(node):
        visitor(element)


def text_content(node: Node | None) -> str:
    """Normalize a text-bearing node to a plain string.

    Accepts a leaf, a sequence of leaves, or an element whose children carry
    the text.
    """
    if node is None:
        return ""
    if isinstance(node, Leaf):
        return node.text
    if isinstance(node, Sequence):
        return "".join(text_content(item) for item in node)
    return text_content(node.children)


def make_text_element(text: str) -> Element:
    """Build a ``w:t`` element whose whitespace survives rendering."""
    return Element(
        name=qn("w:t"),
        attributes={qn("xml:space"): "preserve"},
        children=Sequence([Leaf(text)]),
    )


# =============================================================================
# Parsing and serialization
# =============================================================================


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
        remove_blank_text=False,
    )


def _from_lxml(el: etree._Element, parent_nsmap: dict) -> Element:
    own_nsmap = {
        prefix: uri for prefix, uri in el.nsmap.items() if parent_nsmap.get(prefix) != uri
    }
    element = Element(name=el.tag, attributes=dict(el.attrib), nsmap=own_nsmap)

    if el.text:
        element.append(Leaf(el.text))

    for child in el:
        if isinstance(child.tag, str):
            element.append(_from_lxml(child, el.nsmap))
        else:
            # Comments and processing instructions carry no content for the converter
            log.debug("Dropping non-element node", node=str(child)[:80])
        if child.tail:
            element.append(Leaf(child.tail))

    return element


def parse_markup(data: bytes) -> MarkupDocument:
    """Parse a markup payload into a ``MarkupDocument``.

    Raises:
        lxml.etree.XMLSyntaxError: If the payload is not well-formed
    """
    root = etree.fromstring(data, parser=_make_parser())
    standalone = root.getroottree().docinfo.standalone
    return MarkupDocument(root=_from_lxml(root, {}), standalone=standalone)


def _flatten(children: Sequence) -> Iterator[Leaf | Element]:
    for child in children:
        if isinstance(child, Sequence):
            yield from _flatten(child)
        else:
            yield child


def _populate(target: etree._Element, element: Element) -> None:
    last: etree._Element | None = None
    for child in _flatten(element.children):
        if isinstance(child, Leaf):
            if last is None:
                target.text = (target.text or "") + child.text
            else:
                last.tail = (last.tail or "") + child.text
        else:
            last = etree.SubElement(
                target, child.name, attrib=child.attributes, nsmap=child.nsmap or None
            )
            _populate(last, child)


def serialize_markup(document: MarkupDocument) -> bytes:
    """Serialize a ``MarkupDocument`` back to UTF-8 markup with an XML declaration."""
    root = document.root
    target = etree.Element(root.name, attrib=root.attributes, nsmap=root.nsmap or None)
    _populate(target, root)
    return etree.tostring(
        target,
        xml_declaration=True,
        encoding="UTF-8",
        standalone=document.standalone,
    )
