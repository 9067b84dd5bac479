"""Flattening of document subtrees into plain text."""

from typing import List, Optional, Union

from metwords.shared import TagClassification
from metwords.tree.document import Document

DEFAULT_LOCATOR_LEFT = "<xmet>"
DEFAULT_LOCATOR_RIGHT = "</xmet>"

_PADDING = object()


def flatten(
    document: Document,
    root: int,
    selected: Optional[int] = None,
    tags: Optional[TagClassification] = None,
    locator_left: str = DEFAULT_LOCATOR_LEFT,
    locator_right: str = DEFAULT_LOCATOR_RIGHT,
) -> str:
    """Render the text of a subtree as one string.

    Text of dropped elements (scripts, footnote markers) is left out and a
    space follows padding elements such as ``br``. The text of ``selected``
    is wrapped in the locator tokens so it can be found again in the result.
    The tree is not modified.
    """
    tags = tags or TagClassification()
    parts: List[str] = []
    last_char = ""

    stack: List[Union[int, str, object]] = [root]
    while stack:
        entry = stack.pop()

        if entry is _PADDING:
            if not last_char.isspace():
                parts.append(" ")
                last_char = " "
            continue

        if isinstance(entry, str):
            parts.append(entry)
            last_char = entry[-1:] or last_char
            continue

        node = document.node(entry)
        if entry == selected:
            parts.append(locator_left)
            last_char = locator_left[-1]
            stack.append(locator_right)
            stack.extend(reversed(node.children))
            continue

        if node.is_text:
            if node.text:
                parts.append(node.text)
                last_char = node.text[-1]
            continue

        if tags.is_dropped(node.tag):
            continue

        if tags.is_padded(node.tag):
            stack.append(_PADDING)
        stack.extend(reversed(node.children))

    return "".join(parts)
