"""Configuration classes for word annotation.

This module provides configuration objects for all annotation components:
the tag classification tables that steer traversal and flattening, marker
rendering, the sentence heuristic's character classes, and the backend client.
"""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

# Elements whose subtree is never scanned for words
DEFAULT_SKIP_TAGS: FrozenSet[str] = frozenset({
    "head", "h1", "h2", "h3", "h4", "h5", "h6",
    "script", "style", "pre", "code", "samp", "textarea",
    "img", "svg", "canvas", "video", "audio",
    "form", "input", "select", "button",
    "a", "mark", "ins", "del", "sup", "sub", "small", "big", "cite",
    "fieldset", "legend", "caption", "label", "object",
    "var", "kbd", "details", "summary",
})

# Block-level elements, see
# https://developer.mozilla.org/en-US/docs/Web/HTML/Block-level_elements
DEFAULT_BLOCK_TAGS: FrozenSet[str] = frozenset({
    "address", "article", "aside", "blockquote", "details", "dialog",
    "dd", "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6", "form", "header", "hgroup",
    "li", "main", "nav", "ol", "p", "pre", "section", "table", "ul",
})

DEFAULT_DROPPED_TAGS: FrozenSet[str] = frozenset({"script", "style", "pre", "sup", "sub"})

DEFAULT_PADDING_TAGS: FrozenSet[str] = frozenset({"br"})

_SECTION_NAMES = ("tags", "annotation", "sentence", "client")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class TagClassification:
    """Tag name tables used by the tree walker, flattener and sentence extractor.

    Tag names are stored lowercase; lookups lowercase the queried name.
    """

    skip: FrozenSet[str] = DEFAULT_SKIP_TAGS
    block: FrozenSet[str] = DEFAULT_BLOCK_TAGS
    dropped: FrozenSet[str] = DEFAULT_DROPPED_TAGS
    padding: FrozenSet[str] = DEFAULT_PADDING_TAGS

    def __post_init__(self) -> None:
        """Normalize every table to a lowercase frozenset."""
        for table in ("skip", "block", "dropped", "padding"):
            values = getattr(self, table)
            if isinstance(values, str):
                raise ValueError(f"{table} must be a collection of tag names")
            object.__setattr__(
                self, table, frozenset(name.lower() for name in values)
            )

    def is_skipped(self, tag: str) -> bool:
        return tag.lower() in self.skip

    def is_block(self, tag: str) -> bool:
        return tag.lower() in self.block

    def is_dropped(self, tag: str) -> bool:
        return tag.lower() in self.dropped

    def is_padded(self, tag: str) -> bool:
        return tag.lower() in self.padding


@dataclass
class AnnotationConfig:
    """Configuration for annotation markers and traversal limits."""

    marker_tag: str = "xmetword"
    selected_id: str = "metword-selected"
    color: str = "red"
    times_marker: str = "-"
    locator_left: str = "<xmet>"
    locator_right: str = "</xmet>"
    max_tree_depth: int = 1000

    def __post_init__(self) -> None:
        """Validate annotation configuration."""
        if not self.marker_tag:
            raise ValueError("marker_tag cannot be empty")
        if not self.selected_id:
            raise ValueError("selected_id cannot be empty")
        if len(self.times_marker) != 1:
            raise ValueError("times_marker must be a single character")
        if not self.locator_left or not self.locator_right:
            raise ValueError("locator tokens cannot be empty")
        if self.locator_left == self.locator_right:
            raise ValueError("locator tokens must differ")
        if self.max_tree_depth <= 0:
            raise ValueError("max_tree_depth must be > 0")


@dataclass
class SentenceConfig:
    """Character classes for the sentence boundary heuristic."""

    delimiters: str = ".!?。！？"
    closers: str = "\"'”’"
    fullwidth_closers: str = "。！？"
    scope_delimiters: str = ",.!;?，。！？；"

    def __post_init__(self) -> None:
        """Validate sentence configuration."""
        if not self.delimiters:
            raise ValueError("delimiters cannot be empty")
        if not self.scope_delimiters:
            raise ValueError("scope_delimiters cannot be empty")
        stray = set(self.fullwidth_closers) - set(self.delimiters)
        if stray:
            raise ValueError("fullwidth_closers must be a subset of delimiters")

    def is_delimiter(self, char: str) -> bool:
        return char != "" and char in self.delimiters

    def is_closer(self, char: str) -> bool:
        return char != "" and (char.isspace() or char in self.closers)

    def is_fullwidth_closer(self, char: str) -> bool:
        return char != "" and char in self.fullwidth_closers


@dataclass
class ClientConfig:
    """Configuration for the vocabulary backend client."""

    base_url: str = "http://localhost:8080"
    meets_path: str = "/meets"
    query_path: str = "/query/"
    add_scene_path: str = "/scenes"
    forget_scene_path: str = "/scenes/"
    known_path: str = "/known/"
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        """Validate client configuration."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    def url(self, path: str, suffix: str = "") -> str:
        """Join the base URL, an endpoint path and an optional suffix."""
        return self.base_url.rstrip("/") + path + suffix


@dataclass(frozen=True)
class MetwordsConfig:
    """Complete configuration for annotation sessions.

    Immutable at the top level so one instance can be shared by every
    session in the process.
    """

    tags: TagClassification = field(default_factory=TagClassification)
    annotation: AnnotationConfig = field(default_factory=AnnotationConfig)
    sentence: SentenceConfig = field(default_factory=SentenceConfig)
    client: ClientConfig = field(default_factory=ClientConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.annotation.__post_init__()
            self.sentence.__post_init__()
            self.client.__post_init__()
            self._validate_cross_section()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def _validate_cross_section(self) -> None:
        if self.tags.is_skipped(self.annotation.marker_tag):
            raise ConfigValidationError(
                "marker_tag must not be a skip tag",
                field_name="annotation.marker_tag",
                suggestions=["Choose a custom element name such as 'xmetword'"],
            )
        for token in (self.annotation.locator_left, self.annotation.locator_right):
            if any(self.sentence.is_delimiter(char) for char in token):
                raise ConfigValidationError(
                    "locator tokens must not contain sentence delimiters",
                    field_name="annotation.locator_left",
                )

    def override(self, **kwargs: Any) -> "MetwordsConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = MetwordsConfig()
            >>> config.override(annotation__color="blue").annotation.color
            'blue'
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                section, field_name = key.split("__", 1)
                nested_overrides.setdefault(section, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for section in _SECTION_NAMES:
            current = getattr(self, section)
            if section in nested_overrides:
                try:
                    new_fields[section] = replace(current, **nested_overrides[section])
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=section) from e
            else:
                new_fields[section] = current

        for key, value in nested_overrides.items():
            if key not in _SECTION_NAMES:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        result: Dict[str, Any] = {}
        for section in _SECTION_NAMES:
            section_value = getattr(self, section)
            section_dict: Dict[str, Any] = {}
            for section_field in fields(section_value):
                value = getattr(section_value, section_field.name)
                if isinstance(value, frozenset):
                    value = sorted(value)
                section_dict[section_field.name] = value
            result[section] = section_dict
        result["name"] = self.name
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetwordsConfig":
        """Create configuration from a dictionary.

        Sections missing from ``data`` keep their defaults; unknown keys are
        rejected.
        """
        section_types = {
            "tags": TagClassification,
            "annotation": AnnotationConfig,
            "sentence": SentenceConfig,
            "client": ClientConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "name":
                values["name"] = value
                continue
            if key not in section_types:
                raise ConfigValidationError(
                    f"Unknown configuration section: {key}",
                    field_name=key,
                    suggestions=list(_SECTION_NAMES),
                )
            section_type = section_types[key]
            known = {f.name for f in fields(section_type)}
            unknown = set(value) - known
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in section '{key}': {sorted(unknown)}",
                    field_name=key,
                    suggestions=sorted(known),
                )
            try:
                values[key] = section_type(**value)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=key) from e

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "MetwordsConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration root must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Path) -> "MetwordsConfig":
        """Load configuration from a JSON file."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path}: {e}") from e
        return cls.from_json(content)
