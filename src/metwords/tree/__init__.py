"""Document tree handling for word annotation.

Key Components:
    Document: Arena of element and text nodes addressed by integer ids
    build_document / to_html: Conversion from and to HTML markup
    collect_word_spans: Walks a document and collects word ranges
    Annotator: Wraps ranges in marker elements and tracks the selected marker
    flatten: Renders a subtree as plain text with locator tokens
"""

from .annotator import (
    AnnotationError,
    Annotator,
    InvalidAnchorError,
    StructuralWrapError,
)
from .builder import SUPPORTED_BACKENDS, build_document, to_html
from .document import (
    ROOT_TAG,
    Document,
    DocumentNode,
    NodeNotFoundError,
    NodeType,
    TreeError,
)
from .flatten import flatten
from .walker import Anchor, RangeRecord, collect_word_spans

__all__ = [
    "ROOT_TAG",
    "SUPPORTED_BACKENDS",
    "AnnotationError",
    "Anchor",
    "Annotator",
    "Document",
    "DocumentNode",
    "InvalidAnchorError",
    "NodeNotFoundError",
    "NodeType",
    "RangeRecord",
    "StructuralWrapError",
    "TreeError",
    "build_document",
    "collect_word_spans",
    "flatten",
    "to_html",
]
