"""Word tokenizer built on a two-state character machine.

The tokenizer scans a single text string once, left to right, and reports the
spans of candidate vocabulary words. It never fails: the worst case is an
empty result.
"""

import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import List

# Shortest run of letters reported as a word
MIN_WORD_LENGTH = 2

WORD_CHARACTERS = frozenset(string.ascii_letters)
WORD_DELIMITERS = frozenset(".,!?;:'\")(][")


class TokenizerState(Enum):
    """State machine states for word scanning."""

    NOT_IN_WORD = auto()
    IN_WORD = auto()


@dataclass(frozen=True)
class WordSpan:
    """A word found in one text string, with offsets into that string."""

    word: str
    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span offsets."""
        if self.start < 0:
            raise ValueError("Span start must be >= 0")
        if self.end - self.start < MIN_WORD_LENGTH:
            raise ValueError(f"Span must cover at least {MIN_WORD_LENGTH} characters")

    @property
    def length(self) -> int:
        return self.end - self.start


def is_word_character(char: str) -> bool:
    """Check whether ``char`` is an ASCII letter."""
    return char in WORD_CHARACTERS


def is_word_delimiter(char: str) -> bool:
    """Check whether ``char`` can separate two words."""
    return char.isspace() or char in WORD_DELIMITERS


def tokenize(text: str) -> List[WordSpan]:
    """Find word spans in ``text``.

    A word starts on a letter that opens the string or follows a delimiter,
    and ends on the next delimiter or at the end of the string. Any other
    character (a digit, a hyphen, an accented letter) drops the word being
    scanned, so ``"abc3"`` and ``"x-ray"`` produce nothing for those runs.

    Args:
        text: Content of a single text node

    Returns:
        Non-overlapping spans in left-to-right order

    Examples:
        >>> [(s.word, s.start, s.end) for s in tokenize("Hello, world!")]
        [('hello', 0, 5), ('world', 7, 12)]
    """
    spans: List[WordSpan] = []
    state = TokenizerState.NOT_IN_WORD
    start = 0
    end = start
    last_index = len(text) - 1

    for i, char in enumerate(text):
        if (
            is_word_character(char)
            and state is TokenizerState.NOT_IN_WORD
            and (i == 0 or is_word_delimiter(text[i - 1]))
        ):
            state = TokenizerState.IN_WORD
            start = i

        if is_word_delimiter(char) and state is TokenizerState.IN_WORD:
            state = TokenizerState.NOT_IN_WORD
            end = i

        if is_word_character(char) and i == last_index and state is TokenizerState.IN_WORD:
            state = TokenizerState.NOT_IN_WORD
            end = len(text)

        if not is_word_character(char):
            state = TokenizerState.NOT_IN_WORD

        if end - start >= MIN_WORD_LENGTH:
            spans.append(WordSpan(word=text[start:end].lower(), start=start, end=end))
            # A closed word must never be reported twice
            end = start

    return spans
