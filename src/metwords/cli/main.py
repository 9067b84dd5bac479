"""Main CLI entry point for the metwords command-line tool.

Lists the words of an HTML page, highlights known words, and extracts the
sentence around a word the way a reader's selection would.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from metwords.api import AnnotationSession
from metwords.shared import ConfigError, MetwordsConfig, get_logger
from metwords.tree import SUPPORTED_BACKENDS

logger = get_logger(__name__, None, "cli")


def load_config(path: Optional[Path]) -> MetwordsConfig:
    """Load configuration from ``path``, or use defaults when no path is given."""
    if path is None:
        return MetwordsConfig()
    return MetwordsConfig.from_file(path)


def open_session(path: Path, config: MetwordsConfig, backend: str) -> AnnotationSession:
    markup = path.read_text(encoding="utf-8")
    return AnnotationSession.from_html(markup, config, backend=backend)


def format_words(session: AnnotationSession, output_format: str) -> str:
    """Format the word ranges of a session for output."""
    rows: List[Dict[str, Any]] = [
        {
            "word": record.name,
            "node": record.anchor.start_node,
            "start": record.anchor.start_offset,
            "end": record.anchor.end_offset,
        }
        for record in session.word_ranges()
    ]
    if output_format == "json":
        return json.dumps(rows, indent=2)
    return "\n".join(
        f"{row['word']}\t{row['node']}\t{row['start']}-{row['end']}" for row in rows
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="metwords",
        description="Annotate vocabulary words in HTML documents",
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument(
        "--backend", choices=SUPPORTED_BACKENDS, default="html.parser",
        help="HTML tree builder (default: html.parser)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    words_parser = subparsers.add_parser("words", help="List words in document order")
    words_parser.add_argument("path", type=Path, help="HTML file")
    words_parser.add_argument(
        "--format", choices=["json", "text"], default="text", help="Output format"
    )

    highlight_parser = subparsers.add_parser("highlight", help="Mark known words")
    highlight_parser.add_argument("path", type=Path, help="HTML file")
    highlight_parser.add_argument(
        "--meets", type=Path, required=True,
        help="JSON object mapping known words to occurrence counts",
    )
    highlight_parser.add_argument("-o", "--output", type=Path, help="Output file")

    scene_parser = subparsers.add_parser(
        "scene", help="Print the sentence around the first occurrence of a word"
    )
    scene_parser.add_argument("path", type=Path, help="HTML file")
    scene_parser.add_argument("--word", required=True, help="Word to select")

    return parser


def cmd_words(args: argparse.Namespace, config: MetwordsConfig) -> int:
    """Handle words command."""
    session = open_session(args.path, config, args.backend)
    print(format_words(session, args.format))
    return 0


def cmd_highlight(args: argparse.Namespace, config: MetwordsConfig) -> int:
    """Handle highlight command."""
    try:
        meets = json.loads(args.meets.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Invalid meets file {args.meets}: {e}", file=sys.stderr)
        return 1
    if not isinstance(meets, dict):
        print("Meets file must contain a JSON object", file=sys.stderr)
        return 1

    session = open_session(args.path, config, args.backend)
    markers = session.highlight(meets)
    annotated = session.to_html()

    if args.output:
        args.output.write_text(annotated, encoding="utf-8")
        print(f"Marked {len(markers)} words, written to {args.output}", file=sys.stderr)
    else:
        print(annotated)
    return 0


def cmd_scene(args: argparse.Namespace, config: MetwordsConfig) -> int:
    """Handle scene command."""
    session = open_session(args.path, config, args.backend)
    anchor = session.find_word_anchor(args.word)
    if anchor is None:
        print(f"Word not found: {args.word}", file=sys.stderr)
        return 1

    selected_text = session.anchor_text(anchor)
    if session.select(anchor, selected_text) is None:
        print(f"Not a single word: {selected_text}", file=sys.stderr)
        return 1

    print(session.scene_sentence(selected_text))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    handlers = {
        "words": cmd_words,
        "highlight": cmd_highlight,
        "scene": cmd_scene,
    }
    try:
        return handlers[args.command](args, config)
    except OSError as e:
        logger.error("Command failed", extra={"command": args.command}, exc_info=False)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
