"""Document walker that collects word ranges in document order."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from metwords.shared import TagClassification, get_logger
from metwords.tokenization import tokenize
from metwords.tree.document import Document

DEFAULT_MAX_DEPTH = 1000


@dataclass(frozen=True)
class Anchor:
    """A span of a document between two boundary points.

    For text nodes the offset counts characters; for elements it counts
    children, as in a DOM range.
    """

    start_node: int
    start_offset: int
    end_node: int
    end_offset: int

    def __post_init__(self) -> None:
        """Validate offsets."""
        if self.start_offset < 0 or self.end_offset < 0:
            raise ValueError("Anchor offsets must be >= 0")

    @classmethod
    def within(cls, node_id: int, start: int, end: int) -> "Anchor":
        """Create an anchor confined to one node."""
        return cls(node_id, start, node_id, end)

    @property
    def is_single_node(self) -> bool:
        return self.start_node == self.end_node


@dataclass(eq=False)
class RangeRecord:
    """A word found in the document together with where it sits."""

    name: str
    anchor: Anchor
    times: int = 0

    def __post_init__(self) -> None:
        """Validate record values."""
        if self.times < 0:
            raise ValueError("times must be >= 0")


def collect_word_spans(
    document: Document,
    root: Optional[int] = None,
    tags: Optional[TagClassification] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    session_id: Optional[str] = None,
) -> List[RangeRecord]:
    """Collect a range record for every word under ``root``.

    Subtrees of skip-tagged elements are ignored entirely. A word is only
    found inside a single text node, so ``wo<em>rd</em>`` yields nothing.

    Args:
        document: Document to scan
        root: Subtree to scan, the whole document by default
        tags: Tag classification tables
        max_depth: Subtrees nested deeper than this below ``root`` are skipped
        session_id: Optional session identifier for logging

    Returns:
        Records in document order, each with ``times`` set to 0
    """
    tags = tags or TagClassification()
    logger = get_logger(__name__, session_id, "walker")
    records: List[RangeRecord] = []
    too_deep = 0

    stack: List[Tuple[int, int]] = [(document.root if root is None else root, 0)]
    while stack:
        node_id, depth = stack.pop()
        node = document.node(node_id)

        if node.is_text:
            for span in tokenize(node.text):
                records.append(RangeRecord(
                    name=span.word,
                    anchor=Anchor.within(node_id, span.start, span.end),
                ))
            continue

        if tags.is_skipped(node.tag):
            continue
        if depth >= max_depth:
            too_deep += 1
            continue

        stack.extend((child, depth + 1) for child in reversed(node.children))

    if too_deep:
        logger.warning(
            "Skipped subtrees nested beyond the depth limit",
            extra={"max_depth": max_depth, "skipped_subtrees": too_deep},
        )
    logger.debug("Collected word ranges", extra={"record_count": len(records)})
    return records
