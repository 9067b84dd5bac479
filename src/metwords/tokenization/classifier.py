"""Validity check for user-selected words."""

import re

# "apple", "Apple" or "APPLE"; mixed forms such as "aPPle" are rejected
_WORD_PATTERN = re.compile(r"[a-zA-Z]?[a-z]+|[A-Z]+")


def classify(candidate: str) -> str:
    """Return the lowercased word if ``candidate`` is a single vocabulary word.

    Args:
        candidate: Text selected by the user

    Returns:
        Lowercased word, or an empty string when the selection is not a word
    """
    if _WORD_PATTERN.fullmatch(candidate):
        return candidate.lower()
    return ""
