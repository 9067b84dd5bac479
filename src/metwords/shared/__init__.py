"""Shared utilities for word annotation.

This module provides configuration objects, result types and logging helpers
used across the tokenization, tree, sentence and API layers.
"""

from .config import (
    AnnotationConfig,
    ClientConfig,
    ConfigError,
    ConfigValidationError,
    MetwordsConfig,
    SentenceConfig,
    TagClassification,
)
from .logging import (
    SessionLogger,
    get_logger,
)
from .result import (
    NETWORK_ERROR_CODE,
    FetchResult,
    QueryResult,
)

__all__ = [
    "AnnotationConfig",
    "ClientConfig",
    "ConfigError",
    "ConfigValidationError",
    "MetwordsConfig",
    "SentenceConfig",
    "TagClassification",
    "SessionLogger",
    "get_logger",
    "NETWORK_ERROR_CODE",
    "FetchResult",
    "QueryResult",
]
