"""Conversion between HTML markup and ``Document`` trees.

HTML is parsed with BeautifulSoup and copied into a document arena; the
annotated arena is written back out as HTML.
"""

import html
from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from metwords.shared import get_logger
from metwords.tree.document import Document

SUPPORTED_BACKENDS = ("html.parser", "lxml")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# Markup that carries no document text
_NON_CONTENT_STRINGS = (CData, Comment, Declaration, Doctype, ProcessingInstruction)


def _attribute_value(value: Union[str, List[str]]) -> str:
    # Multi-valued attributes such as class come back as lists
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def build_document(markup: str, backend: str = "html.parser",
                   session_id: Optional[str] = None) -> Document:
    """Parse HTML markup into a ``Document``.

    Args:
        markup: HTML source
        backend: BeautifulSoup tree builder, ``"html.parser"`` or ``"lxml"``
        session_id: Optional session identifier for logging

    Returns:
        Document whose root element holds the parsed top-level nodes
    """
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"backend must be one of {SUPPORTED_BACKENDS}")

    logger = get_logger(__name__, session_id, "builder")
    soup = BeautifulSoup(markup, backend)
    document = Document()

    stack: List[Tuple[Tag, int]] = [(soup, document.root)]
    skipped = 0
    while stack:
        source, target_id = stack.pop()
        for child in source.children:
            if isinstance(child, Tag):
                element_id = document.create_element(
                    child.name,
                    {name: _attribute_value(value) for name, value in child.attrs.items()},
                )
                document.append_child(target_id, element_id)
                stack.append((child, element_id))
            elif isinstance(child, _NON_CONTENT_STRINGS):
                skipped += 1
            elif isinstance(child, NavigableString):
                document.append_child(target_id, document.create_text(str(child)))

    logger.debug(
        "Built document from markup",
        extra={
            "backend": backend,
            "node_count": len(document),
            "skipped_strings": skipped,
        },
    )
    return document


def _open_tag(document: Document, node_id: int) -> str:
    node = document.node(node_id)
    attributes = "".join(
        f' {name}="{html.escape(value, quote=True)}"'
        for name, value in node.attributes.items()
    )
    return f"<{node.tag}{attributes}>"


def to_html(document: Document, node_id: Optional[int] = None) -> str:
    """Serialize a subtree back to HTML.

    The document root itself produces no tag, only its children.
    """
    start_id = document.root if node_id is None else node_id
    parts: List[str] = []
    # Entries are node ids to open, or closing tag strings already rendered
    stack: List[Union[int, str]] = [start_id]
    while stack:
        entry = stack.pop()
        if isinstance(entry, str):
            parts.append(entry)
            continue

        node = document.node(entry)
        if node.is_text:
            parent_id = node.parent
            if parent_id is not None and document.tag(parent_id) in RAW_TEXT_ELEMENTS:
                parts.append(node.text)
            else:
                parts.append(html.escape(node.text, quote=False))
            continue

        is_root = entry == document.root
        if not is_root:
            parts.append(_open_tag(document, entry))
            if node.tag in VOID_ELEMENTS and not node.children:
                continue
            stack.append(f"</{node.tag}>")
        stack.extend(reversed(node.children))

    return "".join(parts)
