"""Public API for word annotation sessions and the vocabulary backend."""

from .client import MetwordsClient
from .session import AnnotationSession, Selection

__all__ = [
    "AnnotationSession",
    "MetwordsClient",
    "Selection",
]
