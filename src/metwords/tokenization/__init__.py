"""Word tokenization for annotation.

Key Components:
    tokenize: Finds word spans inside one text string
    WordSpan: A word with its offsets in the scanned string
    TokenizerState: States of the word scanning machine
    classify: Accepts or rejects a user-selected word
"""

from .classifier import classify
from .tokenizer import (
    MIN_WORD_LENGTH,
    TokenizerState,
    WordSpan,
    is_word_character,
    is_word_delimiter,
    tokenize,
)

__all__ = [
    "MIN_WORD_LENGTH",
    "TokenizerState",
    "WordSpan",
    "classify",
    "is_word_character",
    "is_word_delimiter",
    "tokenize",
]
