"""Annotation of word ranges with marker elements.

An ``Annotator`` owns the annotation state of one document: it wraps ranges in
marker elements and keeps track of the single marker that holds the selected
identity.

Wrapping tries to surround the range in place first. That only works when
both ends of the range sit in the same container; otherwise the covered
content is extracted, partially covered elements are cloned on each side the
way a DOM range extraction does, and the marker is inserted where the content
used to be. Either way the document reads the same afterwards.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from metwords.shared import MetwordsConfig, get_logger
from metwords.tree.document import Document, NodeNotFoundError, TreeError
from metwords.tree.flatten import flatten
from metwords.tree.walker import Anchor, RangeRecord

# Boundary point resolved to (container element, child index)
Point = Tuple[int, int]


class AnnotationError(TreeError):
    """Base exception for annotation errors."""


class InvalidAnchorError(AnnotationError):
    """Raised when an anchor does not describe a span of the live document."""


class StructuralWrapError(AnnotationError):
    """Raised when a range cannot be surrounded in place."""


class Annotator:
    """Wraps document ranges in marker elements."""

    def __init__(
        self,
        document: Document,
        config: Optional[MetwordsConfig] = None,
        session_id: Optional[str] = None,
    ) -> None:
        """Initialize the annotator.

        A marker already carrying the selected id (for example in markup that
        was annotated before) is adopted as the current selection.

        Args:
            document: Document to annotate
            config: Annotation configuration
            session_id: Optional session identifier for logging
        """
        self.document = document
        self.config = config or MetwordsConfig()
        self.logger = get_logger(__name__, session_id, "annotator")
        self._selected: Optional[int] = document.get_element_by_id(
            self.config.annotation.selected_id
        )
        # Text node id -> id of the tail split off it, in text order
        self._splits: Dict[int, int] = {}

    @property
    def selected(self) -> Optional[int]:
        """Id of the marker holding the selected identity, if any."""
        return self._selected

    def is_marker(self, node_id: int) -> bool:
        node = self.document.node(node_id)
        return node.is_element and node.tag == self.config.annotation.marker_tag

    # Selected identity

    def select(self, node_id: int) -> None:
        """Give the selected identity to ``node_id``, taking it from the previous holder."""
        if not self.is_marker(node_id):
            raise AnnotationError(f"Node {node_id} is not an annotation marker")
        if not self.document.is_attached(node_id):
            raise AnnotationError(f"Marker {node_id} is not attached to the document")

        selected_id = self.config.annotation.selected_id
        previous = self._selected
        if previous is not None and previous != node_id and previous in self.document:
            self.document.remove_attribute(previous, "id")
        self.document.set_attribute(node_id, "id", selected_id)
        self._selected = node_id

    def clear_selection(self) -> None:
        """Drop the selected identity from its holder."""
        if self._selected is not None and self._selected in self.document:
            self.document.remove_attribute(self._selected, "id")
        self._selected = None

    # Annotation

    def annotate(self, record: RangeRecord, mark_selected: bool = False) -> int:
        """Wrap the record's anchor in a new marker element.

        Args:
            record: Range to wrap; ``record.times`` is rendered on the marker
            mark_selected: Give the new marker the selected identity

        Returns:
            Id of the new marker element

        Raises:
            InvalidAnchorError: The anchor does not address the live document
        """
        anchor = self._resolve(record.anchor)
        self._validate(anchor)

        try:
            marker = self._surround(anchor)
            strategy = "surround"
        except StructuralWrapError:
            marker = self._extract_and_insert(anchor)
            strategy = "extract"

        annotation = self.config.annotation
        self.document.set_attribute(marker, "style", f"--met-color: {annotation.color}")
        self.document.set_attribute(marker, "data-times", annotation.times_marker * record.times)
        if mark_selected:
            self.select(marker)

        self.logger.debug(
            "Annotated range",
            extra={
                "word": record.name,
                "strategy": strategy,
                "marker": marker,
                "selected": mark_selected,
            },
        )
        return marker

    def annotate_all(self, records: Iterable[RangeRecord]) -> List[int]:
        """Annotate walker records, returning marker ids in document order.

        Records are wrapped last to first: splitting a text node keeps its
        leading text in place, so anchors earlier in the same node stay valid.
        """
        markers = [self.annotate(record) for record in reversed(list(records))]
        markers.reverse()
        return markers

    def mark_selection(self, anchor: Anchor, selected_text: str) -> int:
        """Mark a user selection, reusing the marker that already wraps it.

        When the selection's start sits directly inside a marker whose text
        equals ``selected_text`` (a word highlighted earlier), that marker
        receives the selected identity instead of being wrapped again.

        Returns:
            Id of the marker now holding the selected identity
        """
        anchor = self._resolve(anchor)
        self._validate(anchor)
        parent = self.document.parent(anchor.start_node)
        if parent is not None and self.is_marker(parent):
            others = None if parent == self._selected else self._selected
            marked_text = flatten(
                self.document,
                parent,
                others,
                self.config.tags,
                self.config.annotation.locator_left,
                self.config.annotation.locator_right,
            )
            if marked_text == selected_text:
                self.select(parent)
                self.logger.debug("Reused existing marker", extra={"marker": parent})
                return parent

        record = RangeRecord(name=self.config.annotation.selected_id, anchor=anchor)
        return self.annotate(record, mark_selected=True)

    # Anchor checks

    def _boundary_limit(self, node_id: int) -> int:
        node = self.document.node(node_id)
        return len(node.text) if node.is_text else len(node.children)

    def _point_key(self, node_id: int, offset: int) -> Tuple[int, ...]:
        return self.document.path(node_id) + (offset,)

    def _validate(self, anchor: Anchor) -> None:
        try:
            for node_id, offset in (
                (anchor.start_node, anchor.start_offset),
                (anchor.end_node, anchor.end_offset),
            ):
                if not self.document.is_attached(node_id):
                    raise InvalidAnchorError(f"Anchor node {node_id} is detached")
                if offset > self._boundary_limit(node_id):
                    raise InvalidAnchorError(
                        f"Anchor offset {offset} is out of range for node {node_id}"
                    )
        except NodeNotFoundError as e:
            raise InvalidAnchorError(str(e)) from e

        start_key = self._point_key(anchor.start_node, anchor.start_offset)
        end_key = self._point_key(anchor.end_node, anchor.end_offset)
        if start_key > end_key:
            raise InvalidAnchorError("Anchor ends before it starts")

    def _resolve(self, anchor: Anchor) -> Anchor:
        """Re-point an anchor taken before its text nodes were split.

        Offsets past the end of a split text node continue into the tails
        split off it. A start sitting at the very end of a split node moves to
        the start of the following tail, which is where the wrapped content
        now begins.
        """
        start_node, start_offset = self._follow_splits(
            anchor.start_node, anchor.start_offset, at_start=True
        )
        end_node, end_offset = self._follow_splits(
            anchor.end_node, anchor.end_offset, at_start=False
        )
        return Anchor(start_node, start_offset, end_node, end_offset)

    def _follow_splits(self, node_id: int, offset: int, at_start: bool) -> Point:
        if node_id not in self.document or not self.document.is_text(node_id):
            return node_id, offset
        while node_id in self._splits:
            length = len(self.document.text(node_id))
            if offset < length or (offset == length and not at_start):
                break
            offset -= length
            node_id = self._splits[node_id]
        return node_id, offset

    def _container(self, node_id: int) -> int:
        if self.document.is_text(node_id):
            parent = self.document.parent(node_id)
            if parent is None:
                raise InvalidAnchorError(f"Text node {node_id} has no parent")
            return parent
        return node_id

    # Wrapping strategies

    def _split_text(self, node_id: int, offset: int) -> int:
        tail = self.document.split_text(node_id, offset)
        if node_id in self._splits:
            self._splits[tail] = self._splits[node_id]
        self._splits[node_id] = tail
        return tail

    def _clone(self, node_id: int) -> int:
        """Shallow copy of an element that never carries the selected id."""
        clone = self.document.clone_element(node_id)
        if self.document.get_attribute(clone, "id") == self.config.annotation.selected_id:
            self.document.remove_attribute(clone, "id")
        return clone

    def _create_marker(self) -> int:
        return self.document.create_element(self.config.annotation.marker_tag)

    def _split_boundaries(self, anchor: Anchor) -> Tuple[Point, Point]:
        """Split partially covered text nodes so both ends fall between children."""
        doc = self.document
        start_node, start_offset = anchor.start_node, anchor.start_offset
        end_node, end_offset = anchor.end_node, anchor.end_offset

        if doc.is_text(start_node):
            parent = self._container(start_node)
            index = doc.index_in_parent(start_node)
            if 0 < start_offset < len(doc.text(start_node)):
                tail = self._split_text(start_node, start_offset)
                if end_node == start_node:
                    end_node, end_offset = tail, end_offset - start_offset
                elif end_node == parent and end_offset > index:
                    end_offset += 1
                start: Point = (parent, index + 1)
            elif start_offset == 0:
                start = (parent, index)
            else:
                start = (parent, index + 1)
        else:
            start = (start_node, start_offset)

        if doc.is_text(end_node):
            parent = self._container(end_node)
            index = doc.index_in_parent(end_node)
            if 0 < end_offset < len(doc.text(end_node)):
                self._split_text(end_node, end_offset)
                end: Point = (parent, index + 1)
            elif end_offset == 0:
                end = (parent, index)
            else:
                end = (parent, index + 1)
        else:
            end = (end_node, end_offset)

        return start, end

    def _surround(self, anchor: Anchor) -> int:
        if self._container(anchor.start_node) != self._container(anchor.end_node):
            raise StructuralWrapError("Range crosses element boundaries")

        (container, start_index), (_, end_index) = self._split_boundaries(anchor)
        marker = self._create_marker()
        for child in self.document.children(container)[start_index:end_index]:
            self.document.append_child(marker, child)
        self.document.insert_child(container, start_index, marker)
        return marker

    def _chain_below(self, node_id: int, ancestor: int) -> List[int]:
        """Nodes from ``node_id`` up to the child of ``ancestor`` on that path."""
        chain = [node_id]
        for current in self.document.ancestors(node_id):
            if current == ancestor:
                break
            chain.append(current)
        return chain

    def _common_ancestor(self, first: int, second: int) -> int:
        first_line: Set[int] = {first, *self.document.ancestors(first)}
        if second in first_line:
            return second
        for current in self.document.ancestors(second):
            if current in first_line:
                return current
        raise InvalidAnchorError("Anchor nodes do not share a document")

    def _extract_and_insert(self, anchor: Anchor) -> int:
        doc = self.document
        (start_container, start_index), (end_container, end_index) = (
            self._split_boundaries(anchor)
        )
        common = self._common_ancestor(start_container, end_container)
        marker = self._create_marker()

        start_chain = (
            self._chain_below(start_container, common)
            if start_container != common else []
        )
        end_chain = (
            self._chain_below(end_container, common)
            if end_container != common else []
        )
        first_index = (
            doc.index_in_parent(start_chain[-1]) + 1 if start_chain else start_index
        )
        last_index = doc.index_in_parent(end_chain[-1]) if end_chain else end_index
        middle = doc.children(common)[first_index:last_index]

        if start_chain:
            clone = self._clone(start_chain[-1])
            doc.append_child(marker, clone)
            for level in range(len(start_chain) - 1, 0, -1):
                lower = start_chain[level - 1]
                lower_clone = self._clone(lower)
                doc.append_child(clone, lower_clone)
                following = doc.children(start_chain[level])[doc.index_in_parent(lower) + 1:]
                for sibling in following:
                    doc.append_child(clone, sibling)
                clone = lower_clone
            for child in doc.children(start_container)[start_index:]:
                doc.append_child(clone, child)

        for child in middle:
            doc.append_child(marker, child)

        if end_chain:
            clone = self._clone(end_chain[-1])
            doc.append_child(marker, clone)
            for level in range(len(end_chain) - 1, 0, -1):
                lower = end_chain[level - 1]
                preceding = doc.children(end_chain[level])[:doc.index_in_parent(lower)]
                for sibling in preceding:
                    doc.append_child(clone, sibling)
                lower_clone = self._clone(lower)
                doc.append_child(clone, lower_clone)
                clone = lower_clone
            for child in doc.children(end_container)[:end_index]:
                doc.append_child(clone, child)

        insert_at = doc.index_in_parent(start_chain[-1]) + 1 if start_chain else start_index
        doc.insert_child(common, insert_at, marker)
        return marker
