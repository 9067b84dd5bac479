"""Sentence extraction around the selected marker.

This is a 'good enough' heuristic: it only looks at sentence delimiters, so a
period in a name such as 'Mellon C. Collie' ends the sentence early. Results
are accepted as they are.
"""

from typing import Optional, Tuple

from metwords.shared import MetwordsConfig, SentenceConfig, TagClassification, get_logger
from metwords.tree.document import Document
from metwords.tree.flatten import flatten


def find_scope(
    document: Document,
    selected: int,
    tags: TagClassification,
    sentence: SentenceConfig,
) -> int:
    """Find the ancestor whose text is flattened to look for the sentence.

    Climbing starts at the marker's parent. A non-block ancestor is chosen as
    soon as one of its own text children holds a scope delimiter; the first
    block-level ancestor is chosen unconditionally. Without any block
    ancestor the climb ends at the document root.
    """
    current = document.parent(selected)
    if current is None:
        return selected

    while not tags.is_block(document.tag(current)):
        for child in document.children(current):
            if document.is_text(child) and any(
                char in sentence.scope_delimiters for char in document.text(child)
            ):
                return current
        parent = document.parent(current)
        if parent is None:
            return current
        current = parent

    return current


def _is_boundary(text: str, index: int, sentence: SentenceConfig) -> bool:
    char = text[index]
    return sentence.is_delimiter(char) and (
        sentence.is_closer(text[index + 1:index + 2])
        or sentence.is_fullwidth_closer(char)
    )


def locate_sentence(text: str, target: str, sentence: SentenceConfig) -> Tuple[int, int]:
    """Find the slice of ``text`` holding the sentence that contains ``target``.

    A delimiter counts as a sentence boundary when a closing character
    (whitespace or a closing quote) follows it, or when it is a full-width
    delimiter. The sentence starts after the last boundary before ``target``
    and ends with the first boundary after it.

    Returns:
        ``(start, end)`` offsets; ``end`` is ``len(text)`` when no boundary
        follows the target
    """
    start = 0
    end = len(text)
    found = False
    i = 0
    while i < len(text):
        if not found:
            if _is_boundary(text, i, sentence):
                start = i + 1
            if target and text.startswith(target, i):
                found = True
                i += len(target) - 1

        if found and _is_boundary(text, i, sentence):
            end = i + 1
            break
        i += 1

    return start, end


def extract_sentence(
    document: Document,
    selected: Optional[int],
    selected_text: str,
    config: Optional[MetwordsConfig] = None,
    session_id: Optional[str] = None,
) -> str:
    """Get the sentence the selected marker sits in.

    Args:
        document: Annotated document
        selected: Id of the marker holding the selected identity
        selected_text: Text the user selected
        config: Tag tables, locator tokens and sentence character classes
        session_id: Optional session identifier for logging

    Returns:
        The sentence with locator tokens removed, or an empty string when
        nothing is selected
    """
    if selected is None:
        return ""

    config = config or MetwordsConfig()
    logger = get_logger(__name__, session_id, "sentence")
    left = config.annotation.locator_left
    right = config.annotation.locator_right

    scope = find_scope(document, selected, config.tags, config.sentence)
    text = flatten(document, scope, selected, config.tags, left, right)
    start, end = locate_sentence(text, left + selected_text + right, config.sentence)

    logger.debug(
        "Located sentence",
        extra={"scope": scope, "scope_length": len(text), "start": start, "end": end},
    )
    return text[start:end].replace(left, "").replace(right, "").strip()
