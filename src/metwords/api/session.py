"""Annotation session for one document.

The session ties the pieces together the way a page does while the user
reads it: known words are highlighted, a selection is checked and marked, and
the sentence around the marked word becomes a scene for the backend.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from metwords.api.client import MetwordsClient
from metwords.sentence import extract_sentence
from metwords.shared import FetchResult, MetwordsConfig, get_logger
from metwords.tokenization import classify
from metwords.tree import (
    Anchor,
    Annotator,
    Document,
    RangeRecord,
    build_document,
    collect_word_spans,
    to_html,
)


@dataclass(frozen=True)
class Selection:
    """A user selection that was accepted as a word and marked."""

    word: str
    marker: int


class AnnotationSession:
    """Owns the annotation state of one document."""

    def __init__(
        self,
        document: Document,
        config: Optional[MetwordsConfig] = None,
        client: Optional[MetwordsClient] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.document = document
        self.config = config or MetwordsConfig()
        self.client = client
        self.session_id = session_id
        self.annotator = Annotator(document, self.config, session_id)
        self.logger = get_logger(__name__, session_id, "session")

    @classmethod
    def from_html(
        cls,
        markup: str,
        config: Optional[MetwordsConfig] = None,
        client: Optional[MetwordsClient] = None,
        backend: str = "html.parser",
        session_id: Optional[str] = None,
    ) -> "AnnotationSession":
        """Create a session over freshly parsed HTML."""
        document = build_document(markup, backend, session_id)
        return cls(document, config, client, session_id)

    @property
    def selected(self) -> Optional[int]:
        return self.annotator.selected

    def word_ranges(self) -> List[RangeRecord]:
        """Collect the word ranges of the whole document."""
        return collect_word_spans(
            self.document,
            tags=self.config.tags,
            max_depth=self.config.annotation.max_tree_depth,
            session_id=self.session_id,
        )

    def highlight(self, meets: Mapping[str, int]) -> List[int]:
        """Mark every occurrence of the words in ``meets``.

        Args:
            meets: Occurrence count per known word; words whose count is not
                a non-negative integer are left unmarked

        Returns:
            Marker ids in document order
        """
        counts = self._occurrence_counts(meets)
        records = [record for record in self.word_ranges() if record.name in counts]
        for record in records:
            record.times = counts[record.name]
        markers = self.annotator.annotate_all(records)
        self.logger.info(
            "Highlighted known words",
            extra={"marker_count": len(markers), "known_words": len(meets)},
        )
        return markers

    def _occurrence_counts(self, meets: Mapping[str, Any]) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        rejected = []
        for word, value in meets.items():
            try:
                count = int(value)
            except (TypeError, ValueError):
                count = -1
            if count < 0 or isinstance(value, bool):
                rejected.append(word)
            else:
                counts[word] = count
        if rejected:
            self.logger.warning(
                "Ignoring words with invalid occurrence counts",
                extra={"words": sorted(map(str, rejected))},
            )
        return counts

    def highlight_from_backend(self) -> List[int]:
        """Highlight the words the backend reports for the user."""
        return self.highlight(self._require_client().get_meets())

    def select(self, anchor: Anchor, selected_text: str) -> Optional[Selection]:
        """Mark a user selection if it is a single word.

        Returns:
            The accepted selection, or None when the text is not a word
        """
        word = classify(selected_text)
        if not word:
            self.logger.debug("Selection is not a word", extra={"text": selected_text})
            return None
        marker = self.annotator.mark_selection(anchor, selected_text)
        return Selection(word=word, marker=marker)

    def scene_sentence(self, selected_text: str) -> str:
        """Get the sentence around the selected marker, or an empty string."""
        return extract_sentence(
            self.document,
            self.annotator.selected,
            selected_text,
            self.config,
            self.session_id,
        )

    def save_scene(self, word_id: int, url: str, selected_text: str) -> FetchResult:
        """Send the sentence around the selection to the backend as a scene."""
        scene = {"id": word_id, "url": url, "text": self.scene_sentence(selected_text)}
        return self._require_client().add_scene(scene)

    def find_word_anchor(self, word: str) -> Optional[Anchor]:
        """Get the anchor of the first occurrence of ``word``, ignoring case."""
        target = word.lower()
        for record in self.word_ranges():
            if record.name == target:
                return record.anchor
        return None

    def anchor_text(self, anchor: Anchor) -> str:
        """Get the text covered by an anchor confined to one text node."""
        if not anchor.is_single_node or not self.document.is_text(anchor.start_node):
            raise ValueError("Anchor must lie within a single text node")
        return self.document.text(anchor.start_node)[anchor.start_offset:anchor.end_offset]

    def to_html(self) -> str:
        return to_html(self.document)

    def _require_client(self) -> MetwordsClient:
        if self.client is None:
            raise RuntimeError("No backend client configured for this session")
        return self.client
