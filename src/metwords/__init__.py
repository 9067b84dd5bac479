"""Metwords word annotator.

Finds vocabulary words in HTML documents, wraps them in visible markers,
tracks the word the reader selected and reconstructs the sentence around it
as a usage example.

Progressive API Disclosure:
- Level 1: Functions - tokenize(), classify(), build_document(), flatten()
- Level 2: Annotator and sentence extraction over a Document
- Level 3: AnnotationSession tying a document to the vocabulary backend
"""

__version__ = "0.1.0"
__author__ = "Metwords Team"

from .api import AnnotationSession, MetwordsClient, Selection
from .sentence import extract_sentence
from .shared.config import MetwordsConfig, TagClassification
from .tokenization import WordSpan, classify, tokenize
from .tree import (
    Anchor,
    Annotator,
    Document,
    RangeRecord,
    build_document,
    collect_word_spans,
    flatten,
    to_html,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Functions
    "tokenize",
    "classify",
    "build_document",
    "to_html",
    "collect_word_spans",
    "flatten",
    "extract_sentence",

    # Level 2: Tree annotation
    "Anchor",
    "Annotator",
    "Document",
    "RangeRecord",
    "WordSpan",

    # Level 3: Sessions and backend
    "AnnotationSession",
    "MetwordsClient",
    "Selection",

    # Configuration
    "MetwordsConfig",
    "TagClassification",
]
