"""Markup tree and field-code handling for WordprocessingML payloads."""

from docmirror.markup.fields import (
    inject_field_code_sentinels,
    inject_field_sentinels,
    sentinel_text,
    take_field_instruction,
)
from docmirror.markup.tree import (
    Element,
    Leaf,
    MarkupDocument,
    Node,
    Sequence,
    iter_elements,
    make_text_element,
    parse_markup,
    qn,
    serialize_markup,
    text_content,
    walk,
)

__all__ = [
    "Element",
    "Leaf",
    "MarkupDocument",
    "Node",
    "Sequence",
    "inject_field_code_sentinels",
    "inject_field_sentinels",
    "iter_elements",
    "make_text_element",
    "parse_markup",
    "qn",
    "sentinel_text",
    "serialize_markup",
    "take_field_instruction",
    "text_content",
    "walk",
]
