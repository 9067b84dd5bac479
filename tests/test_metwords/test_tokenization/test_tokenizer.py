"""Tests for the word tokenizer state machine."""

import pytest

from metwords.tokenization import (
    TokenizerState,
    WordSpan,
    is_word_character,
    is_word_delimiter,
    tokenize,
)


def _triples(text):
    return [(span.word, span.start, span.end) for span in tokenize(text)]


class TestWordSpan:
    """Tests for WordSpan validation."""

    def test_valid_span(self) -> None:
        """Test creating a span of two characters."""
        span = WordSpan(word="ok", start=3, end=5)
        assert span.length == 2

    def test_single_character_span_rejected(self) -> None:
        """Test that one-character spans are not words."""
        with pytest.raises(ValueError, match="at least 2 characters"):
            WordSpan(word="a", start=0, end=1)

    def test_negative_start_rejected(self) -> None:
        """Test that negative offsets are rejected."""
        with pytest.raises(ValueError, match="Span start must be >= 0"):
            WordSpan(word="ab", start=-1, end=1)


class TestCharacterClasses:
    """Tests for character classification helpers."""

    @pytest.mark.parametrize("char", ["a", "Z", "m"])
    def test_ascii_letters_are_word_characters(self, char: str) -> None:
        """Test ASCII letters are word characters."""
        assert is_word_character(char)

    @pytest.mark.parametrize("char", ["1", "é", "-", " ", "_"])
    def test_other_characters_are_not_word_characters(self, char: str) -> None:
        """Test digits, accents and symbols are not word characters."""
        assert not is_word_character(char)

    @pytest.mark.parametrize("char", [" ", "\t", "\n", ".", ",", "!", "?", ";", ":",
                                      "'", '"', "(", ")", "[", "]", "\u00a0"])
    def test_delimiters(self, char: str) -> None:
        """Test whitespace and listed punctuation delimit words."""
        assert is_word_delimiter(char)

    @pytest.mark.parametrize("char", ["-", "1", "a", "/", "{"])
    def test_non_delimiters(self, char: str) -> None:
        """Test other characters do not delimit words."""
        assert not is_word_delimiter(char)

    def test_states(self) -> None:
        """Test the machine has exactly two states."""
        assert {state.name for state in TokenizerState} == {"NOT_IN_WORD", "IN_WORD"}


class TestTokenize:
    """Tests for tokenize()."""

    def test_hello_world(self) -> None:
        """Test the basic example with punctuation."""
        assert _triples("Hello, world!") == [("hello", 0, 5), ("world", 7, 12)]

    def test_empty_string(self) -> None:
        """Test empty input yields nothing."""
        assert tokenize("") == []

    def test_word_at_end_of_string(self) -> None:
        """Test end of string closes a word."""
        assert _triples("Hi") == [("hi", 0, 2)]
        assert _triples("say hello") == [("say", 0, 3), ("hello", 4, 9)]

    def test_single_letters_never_reported(self) -> None:
        """Test one-letter words are dropped whatever surrounds them."""
        assert tokenize("a") == []
        assert tokenize("I") == []
        assert _triples("I am a cat.") == [("am", 2, 4), ("cat", 7, 10)]
        assert tokenize("(a) [I] 'a' \"I\"") == []

    def test_words_are_lowercased(self) -> None:
        """Test the word field is lowercased."""
        assert _triples("APPLE Pie") == [("apple", 0, 5), ("pie", 6, 9)]

    def test_brackets_and_quotes_delimit(self) -> None:
        """Test brackets and quotes delimit words."""
        assert _triples("(Hello)") == [("hello", 1, 6)]
        assert _triples("[one]\"two\"") == [("one", 1, 4), ("two", 6, 9)]

    def test_digit_drops_word(self) -> None:
        """Test a digit inside a run suppresses the whole run."""
        assert _triples("abc3 def") == [("def", 5, 8)]
        assert tokenize("3abc") == []
        assert tokenize("abc3def") == []

    def test_hyphen_drops_word(self) -> None:
        """Test a hyphen is neither a letter nor a delimiter."""
        assert tokenize("x-ray") == []
        assert _triples("well-known fact") == [("fact", 11, 15)]

    def test_accented_letter_drops_word(self) -> None:
        """Test non-ASCII letters stop the word without reporting it."""
        assert tokenize("café") == []
        assert _triples("café noir") == [("noir", 5, 9)]

    def test_apostrophe_splits_contractions(self) -> None:
        """Test an apostrophe ends the word before it."""
        assert _triples("don't") == [("don", 0, 3)]
        assert _triples("it's fine") == [("it", 0, 2), ("fine", 5, 9)]

    def test_unicode_whitespace_delimits(self) -> None:
        """Test non-breaking space separates words."""
        assert _triples("foo\u00a0bar") == [("foo", 0, 3), ("bar", 4, 7)]

    def test_repeated_words_reported_each_time(self) -> None:
        """Test every occurrence produces its own span."""
        assert _triples("test one test") == [
            ("test", 0, 4), ("one", 5, 8), ("test", 9, 13)
        ]

    @pytest.mark.parametrize("text", [
        "Hello, world!",
        "The quick brown fox; jumps over: the lazy dog?",
        "  leading and trailing  ",
        "mixed123 tokens 4you and (brackets) [here]",
        "a b c dd e ff",
        "It's a \"quoted\" phrase... isn't it?!",
        "\tTabs\nand\r\nnewlines",
    ])
    def test_span_properties(self, text: str) -> None:
        """Test spans are long enough, match the text and never overlap."""
        spans = tokenize(text)
        previous_end = -1
        for span in spans:
            assert span.end - span.start >= 2
            assert span.word == text[span.start:span.end].lower()
            assert span.start >= previous_end
            previous_end = span.end
        starts = [span.start for span in spans]
        assert starts == sorted(set(starts))
