"""Sentence reconstruction around a selected word."""

from .extractor import extract_sentence, find_scope, locate_sentence

__all__ = [
    "extract_sentence",
    "find_scope",
    "locate_sentence",
]
