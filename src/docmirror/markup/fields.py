"""Field-code sentinel injection.

Word stores field codes (``DOCPROPERTY``, ``MERGEFIELD`` and friends) as
``w:instrText`` inside runs. Converters drop everything else in such a run,
so each run that carries an instruction is followed by a new sibling run
holding the instruction wrapped in sentinels as visible ``w:t`` text. A later
pass turns the sentinels into inline tokens.
"""

import copy
import re

from docmirror.config.constants import SENTINEL_CLOSE, SENTINEL_OPEN
from docmirror.markup.tree import (
    Element,
    MarkupDocument,
    Node,
    iter_elements,
    make_text_element,
    parse_markup,
    qn,
    serialize_markup,
    text_content,
    walk,
)
from docmirror.utils.logging import get_logger

log = get_logger(__name__)

W_R = qn("w:r")
W_RPR = qn("w:rPr")
W_INSTR_TEXT = qn("w:instrText")

_WHITESPACE = re.compile(r"\s+")


def take_field_instruction(run: Element) -> str:
    """Collect every field instruction inside ``run`` as one normalized string.

    Instructions split across several ``w:instrText`` elements are joined with
    a single space; whitespace runs collapse to one space.
    """
    fragments: list[str] = []
    for element in iter_elements(run.children):
        if element.name != W_INSTR_TEXT:
            continue
        fragment = text_content(element).strip()
        if fragment:
            fragments.append(fragment)
    return _WHITESPACE.sub(" ", " ".join(fragments)).strip()


def sentinel_text(instruction: str) -> str:
    """Wrap an instruction in the sentinel pair."""
    return f"{SENTINEL_OPEN}{instruction}{SENTINEL_CLOSE}"


def make_sentinel_run(run: Element, instruction: str) -> Element:
    """Build the run that shows ``instruction`` after the field run ``run``.

    The new run copies the field run's formatting (``w:rPr``) so the token
    reads like the text around it.
    """
    sentinel = Element(name=W_R)
    for properties in run.get(W_RPR)[:1]:
        sentinel.append(copy.deepcopy(properties))
    sentinel.append(make_text_element(sentinel_text(instruction)))
    return sentinel


def inject_field_sentinels(tree: Node) -> Node:
    """Insert a sentinel run right after every run carrying a field instruction.

    The field runs themselves are left untouched. Runs whose instruction is
    empty after normalization get nothing.

    Returns:
        The same tree, mutated in place
    """
    injected = 0

    def visit(element: Element) -> None:
        nonlocal injected
        if W_R not in element:
            return
        children: list[Node] = []
        for child in element.children:
            children.append(child)
            if not (isinstance(child, Element) and child.name == W_R):
                continue
            instruction = take_field_instruction(child)
            if instruction:
                children.append(make_sentinel_run(child, instruction))
                injected += 1
        element.children.items[:] = children

    walk(tree, visit)
    log.debug("Field sentinels injected", runs=injected)
    return tree


def inject_field_code_sentinels(markup: bytes) -> bytes:
    """Parse a markup payload, inject field sentinels and serialize it again.

    Raises:
        lxml.etree.XMLSyntaxError: If the payload is not well-formed
    """
    document: MarkupDocument = parse_markup(markup)
    inject_field_sentinels(document.root)
    return serialize_markup(document)
