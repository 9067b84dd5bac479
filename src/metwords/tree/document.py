"""Arena-backed document tree.

Nodes live in a single ``Document`` and are addressed by stable integer ids.
Child lists hold ids in document order; the parent id is a lookup-only back
link used for upward traversal. Removing a node from the tree detaches it but
keeps it addressable, so ids held by callers never dangle.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Tuple

ROOT_TAG = "#document"


class TreeError(Exception):
    """Base exception for document tree errors."""


class NodeNotFoundError(TreeError):
    """Raised when a node id does not belong to the document."""


class NodeType(Enum):
    """Kinds of document nodes."""

    ELEMENT = auto()
    TEXT = auto()


@dataclass(eq=False)
class DocumentNode:
    """A single element or text node stored in a document arena."""

    node_id: int
    node_type: NodeType
    tag: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate node values."""
        if self.node_type is NodeType.ELEMENT and not self.tag:
            raise ValueError("Element tag cannot be empty")
        if self.node_type is NodeType.TEXT and (self.tag or self.children):
            raise ValueError("Text nodes cannot have a tag or children")

    @property
    def is_element(self) -> bool:
        return self.node_type is NodeType.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.node_type is NodeType.TEXT


class Document:
    """Ordered tree of element and text nodes addressed by integer ids."""

    def __init__(self) -> None:
        self._nodes: Dict[int, DocumentNode] = {}
        self._next_id = 0
        self.root = self.create_element(ROOT_TAG)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # Node creation

    def _add(self, node_type: NodeType, **values: Any) -> int:
        node_id = self._next_id
        self._nodes[node_id] = DocumentNode(node_id=node_id, node_type=node_type, **values)
        self._next_id += 1
        return node_id

    def create_element(self, tag: str, attributes: Optional[Dict[str, str]] = None) -> int:
        """Create a detached element and return its id."""
        return self._add(
            NodeType.ELEMENT, tag=tag.lower(), attributes=dict(attributes or {})
        )

    def create_text(self, text: str) -> int:
        """Create a detached text node and return its id."""
        return self._add(NodeType.TEXT, text=text)

    def clone_element(self, node_id: int) -> int:
        """Create a detached shallow copy of an element (tag and attributes)."""
        node = self.node(node_id)
        if not node.is_element:
            raise TreeError("Only elements can be cloned")
        return self.create_element(node.tag, node.attributes)

    # Node queries

    def node(self, node_id: int) -> DocumentNode:
        """Get the node stored under ``node_id``."""
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Unknown node id: {node_id}") from None

    def is_element(self, node_id: int) -> bool:
        return self.node(node_id).is_element

    def is_text(self, node_id: int) -> bool:
        return self.node(node_id).is_text

    def tag(self, node_id: int) -> str:
        """Get the tag of an element, or an empty string for text nodes."""
        return self.node(node_id).tag

    def text(self, node_id: int) -> str:
        return self.node(node_id).text

    def parent(self, node_id: int) -> Optional[int]:
        return self.node(node_id).parent

    def children(self, node_id: int) -> List[int]:
        """Get a copy of the child ids in document order."""
        return list(self.node(node_id).children)

    def index_in_parent(self, node_id: int) -> int:
        """Get the position of a node among its parent's children."""
        parent_id = self.parent(node_id)
        if parent_id is None:
            raise TreeError(f"Node {node_id} has no parent")
        return self._nodes[parent_id].children.index(node_id)

    def get_attribute(self, node_id: int, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.node(node_id).attributes.get(name, default)

    def set_attribute(self, node_id: int, name: str, value: str) -> None:
        node = self.node(node_id)
        if not node.is_element:
            raise TreeError("Attributes can only be set on elements")
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        node.attributes[name] = value

    def remove_attribute(self, node_id: int, name: str) -> None:
        self.node(node_id).attributes.pop(name, None)

    def ancestors(self, node_id: int) -> Iterator[int]:
        """Iterate over the ancestors of a node, nearest first."""
        parent_id = self.parent(node_id)
        while parent_id is not None:
            yield parent_id
            parent_id = self._nodes[parent_id].parent

    def is_attached(self, node_id: int) -> bool:
        """Check whether a node is reachable from the document root."""
        if node_id == self.root:
            return True
        for ancestor_id in self.ancestors(node_id):
            if ancestor_id == self.root:
                return True
        return False

    def path(self, node_id: int) -> Tuple[int, ...]:
        """Get the child-index path from the root to an attached node."""
        indexes: List[int] = []
        current = node_id
        while current != self.root:
            parent_id = self.parent(current)
            if parent_id is None:
                raise TreeError(f"Node {node_id} is not attached to the document")
            indexes.append(self._nodes[parent_id].children.index(current))
            current = parent_id
        return tuple(reversed(indexes))

    def iter_preorder(self, node_id: Optional[int] = None) -> Iterator[int]:
        """Iterate over a subtree in document order."""
        stack = [self.root if node_id is None else node_id]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children))

    def get_element_by_id(self, id_value: str) -> Optional[int]:
        """Find the first attached element whose ``id`` attribute equals ``id_value``."""
        for node_id in self.iter_preorder():
            if self._nodes[node_id].attributes.get("id") == id_value:
                return node_id
        return None

    def text_content(self, node_id: Optional[int] = None) -> str:
        """Concatenate every text node of a subtree."""
        return "".join(
            self._nodes[current].text
            for current in self.iter_preorder(node_id)
            if self._nodes[current].is_text
        )

    # Mutation

    def insert_child(self, parent_id: int, index: int, child_id: int) -> None:
        """Insert ``child_id`` at ``index`` among the children of ``parent_id``.

        A child that is still attached elsewhere is detached first.
        """
        parent = self.node(parent_id)
        child = self.node(child_id)
        if not parent.is_element:
            raise TreeError("Text nodes cannot have children")
        if child_id == parent_id or child_id in self.ancestors(parent_id):
            raise TreeError("Inserting a node below itself would create a cycle")

        if child.parent is not None:
            old_siblings = self._nodes[child.parent].children
            old_index = old_siblings.index(child_id)
            old_siblings.pop(old_index)
            if child.parent == parent_id and old_index < index:
                index -= 1

        if not (0 <= index <= len(parent.children)):
            raise IndexError("Child index out of range")

        parent.children.insert(index, child_id)
        child.parent = parent_id

    def append_child(self, parent_id: int, child_id: int) -> None:
        self.insert_child(parent_id, len(self.node(parent_id).children), child_id)

    def remove_child(self, parent_id: int, child_id: int) -> bool:
        """Detach a child from its parent; returns False if it was not a child."""
        parent = self.node(parent_id)
        if child_id not in parent.children:
            return False
        parent.children.remove(child_id)
        self._nodes[child_id].parent = None
        return True

    def split_text(self, node_id: int, offset: int) -> int:
        """Split a text node at ``offset``.

        The original node keeps the text before ``offset``; a new node holding
        the rest is inserted right after it and its id is returned.
        """
        node = self.node(node_id)
        if not node.is_text:
            raise TreeError("Only text nodes can be split")
        if not (0 <= offset <= len(node.text)):
            raise IndexError("Split offset out of range")

        tail_id = self.create_text(node.text[offset:])
        node.text = node.text[:offset]
        if node.parent is not None:
            self.insert_child(node.parent, self.index_in_parent(node_id) + 1, tail_id)
        return tail_id

    def _shell_dict(self, node_id: int) -> Dict[str, Any]:
        node = self.node(node_id)
        if node.is_text:
            return {"text": node.text}
        result: Dict[str, Any] = {"tag": node.tag}
        if node.attributes:
            result["attributes"] = dict(node.attributes)
        return result

    def to_dict(self, node_id: Optional[int] = None) -> Dict[str, Any]:
        """Convert a subtree to a nested dictionary."""
        start_id = self.root if node_id is None else node_id
        result = self._shell_dict(start_id)
        stack: List[Tuple[int, Dict[str, Any]]] = [(start_id, result)]
        while stack:
            current, entry = stack.pop()
            children = self._nodes[current].children
            if not children:
                continue
            entry["children"] = [self._shell_dict(child) for child in children]
            stack.extend(zip(children, entry["children"]))
        return result
