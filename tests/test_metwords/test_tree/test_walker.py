"""Tests for collecting word ranges from a document."""

import logging

import pytest

from metwords.shared import TagClassification
from metwords.tree import Anchor, RangeRecord, build_document, collect_word_spans


def _words(markup, **kwargs):
    doc = build_document(markup)
    return [record.name for record in collect_word_spans(doc, **kwargs)]


class TestAnchor:
    """Tests for Anchor and RangeRecord values."""

    def test_within(self) -> None:
        """Test an anchor confined to a single node."""
        anchor = Anchor.within(4, 1, 3)
        assert anchor == Anchor(4, 1, 4, 3)
        assert anchor.is_single_node

    def test_negative_offset_rejected(self) -> None:
        """Test negative offsets are rejected."""
        with pytest.raises(ValueError):
            Anchor(1, -1, 1, 2)

    def test_negative_times_rejected(self) -> None:
        """Test occurrence counts cannot be negative."""
        with pytest.raises(ValueError):
            RangeRecord("cat", Anchor.within(1, 0, 3), times=-1)


class TestCollectWordSpans:
    """Tests for collect_word_spans()."""

    def test_document_order(self) -> None:
        """Test words come out in document order across elements."""
        assert _words("<p>The cat <b>sat on</b> the mat.</p><p>Next one</p>") == [
            "the", "cat", "sat", "on", "the", "mat", "next", "one",
        ]

    def test_anchor_offsets(self) -> None:
        """Test anchors address the word inside its text node."""
        doc = build_document("<p>The cat sat.</p>")
        records = collect_word_spans(doc)
        cat = records[1]
        assert cat.name == "cat"
        assert cat.times == 0
        text = doc.text(cat.anchor.start_node)
        assert text[cat.anchor.start_offset:cat.anchor.end_offset] == "cat"

    def test_skip_tags_ignored(self) -> None:
        """Test subtrees of skip-tagged elements are not scanned."""
        markup = (
            "<p>keep <a href='#'>link text</a> this"
            "<script>var hidden;</script><code>some code</code></p>"
            "<h1>Title words</h1>"
        )
        assert _words(markup) == ["keep", "this"]

    def test_skip_tags_are_case_insensitive(self) -> None:
        """Test custom skip tables match tags regardless of case."""
        tags = TagClassification(skip=frozenset({"EM"}))
        assert _words("<p>plain <em>emphasis</em></p>", tags=tags) == ["plain"]

    def test_words_do_not_cross_elements(self) -> None:
        """Test a word split by markup is not found."""
        assert _words("<p>wo<em>rd</em></p>") == ["wo", "rd"]

    def test_subtree_root(self) -> None:
        """Test scanning only part of the document."""
        doc = build_document("<p>first words</p><p>second words</p>")
        second = doc.children(doc.root)[1]
        names = [record.name for record in collect_word_spans(doc, root=second)]
        assert names == ["second", "words"]

    def test_depth_limit(self, caplog) -> None:
        """Test subtrees beyond the depth limit are skipped with a warning."""
        markup = "<div>top<div>middle<div>bottom</div></div></div>"
        with caplog.at_level(logging.WARNING, logger="metwords.tree.walker"):
            names = _words(markup, max_depth=3)
        assert names == ["top", "middle"]
        assert "depth limit" in caplog.text

    def test_empty_document(self) -> None:
        """Test a document without text yields nothing."""
        assert _words("") == []
