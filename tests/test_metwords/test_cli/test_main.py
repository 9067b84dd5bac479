"""Tests for the CLI main module."""

import json
from unittest.mock import patch

import pytest

from metwords.cli.main import (
    create_argument_parser,
    format_words,
    load_config,
    main,
)
from metwords.api import AnnotationSession
from metwords.shared import ConfigError, MetwordsConfig


@pytest.fixture
def page(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("<p>Intro here. The cat sat on the mat.</p>", encoding="utf-8")
    return path


class TestArgumentParser:
    """Test argument parsing."""

    def test_words_defaults(self) -> None:
        """Test default options of the words command."""
        args = create_argument_parser().parse_args(["words", "page.html"])
        assert args.command == "words"
        assert args.format == "text"
        assert args.backend == "html.parser"
        assert args.config is None

    def test_verbosity_exclusive(self) -> None:
        """Test verbose and quiet cannot be combined."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["-v", "-q", "words", "page.html"])

    def test_highlight_requires_meets(self) -> None:
        """Test the meets file is required."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["highlight", "page.html"])

    def test_unknown_backend(self) -> None:
        """Test only supported backends are accepted."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["--backend", "html5lib", "words", "x"])


class TestHelpers:
    """Test configuration loading and output formatting."""

    def test_load_default_config(self) -> None:
        """Test defaults are used without a path."""
        assert load_config(None) == MetwordsConfig()

    def test_load_missing_config(self, tmp_path) -> None:
        """Test a missing file raises a configuration error."""
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json")

    def test_format_words_text(self) -> None:
        """Test the tab-separated text format."""
        session = AnnotationSession.from_html("<p>The cat</p>")
        lines = format_words(session, "text").splitlines()
        assert [line.split("\t")[0] for line in lines] == ["the", "cat"]
        assert lines[1].split("\t")[2] == "4-7"

    def test_format_words_json(self) -> None:
        """Test the JSON format."""
        session = AnnotationSession.from_html("<p>The cat</p>")
        rows = json.loads(format_words(session, "json"))
        assert [(row["word"], row["start"], row["end"]) for row in rows] == [
            ("the", 0, 3), ("cat", 4, 7),
        ]


class TestMain:
    """Test the main entry point."""

    def test_no_command(self, capsys) -> None:
        """Test help is shown without a command."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_words(self, page, capsys) -> None:
        """Test listing words."""
        assert main(["words", str(page), "--format", "json"]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert [row["word"] for row in rows][:3] == ["intro", "here", "the"]

    def test_highlight_to_stdout(self, page, tmp_path, capsys) -> None:
        """Test annotated HTML is printed."""
        meets = tmp_path / "meets.json"
        meets.write_text(json.dumps({"cat": 2}), encoding="utf-8")
        assert main(["highlight", str(page), "--meets", str(meets)]) == 0
        out = capsys.readouterr().out
        assert '<xmetword style="--met-color: red" data-times="--">cat</xmetword>' in out

    def test_highlight_to_file(self, page, tmp_path, capsys) -> None:
        """Test annotated HTML is written to the output file."""
        meets = tmp_path / "meets.json"
        meets.write_text(json.dumps({"the": 1}), encoding="utf-8")
        output = tmp_path / "out.html"
        assert main(["highlight", str(page), "--meets", str(meets), "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").count("<xmetword") == 2
        assert "Marked 2 words" in capsys.readouterr().err

    def test_highlight_invalid_meets(self, page, tmp_path, capsys) -> None:
        """Test malformed meets files are reported."""
        meets = tmp_path / "meets.json"
        meets.write_text("[1, 2]", encoding="utf-8")
        assert main(["highlight", str(page), "--meets", str(meets)]) == 1
        assert "must contain a JSON object" in capsys.readouterr().err

        meets.write_text("{broken", encoding="utf-8")
        assert main(["highlight", str(page), "--meets", str(meets)]) == 1
        assert "Invalid meets file" in capsys.readouterr().err

    def test_scene(self, page, capsys) -> None:
        """Test the sentence around a word is printed."""
        assert main(["scene", str(page), "--word", "Cat"]) == 0
        assert capsys.readouterr().out.strip() == "The cat sat on the mat."

    def test_scene_word_missing(self, page, capsys) -> None:
        """Test a missing word is reported."""
        assert main(["scene", str(page), "--word", "dog"]) == 1
        assert "Word not found: dog" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys) -> None:
        """Test unreadable input files are reported."""
        assert main(["words", str(tmp_path / "missing.html")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_config(self, page, tmp_path, capsys) -> None:
        """Test configuration errors are reported."""
        config = tmp_path / "config.json"
        config.write_text('{"colors": {}}', encoding="utf-8")
        assert main(["--config", str(config), "words", str(page)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_config_applied(self, page, tmp_path, capsys) -> None:
        """Test configuration from a file changes the output."""
        config = tmp_path / "config.json"
        config.write_text('{"annotation": {"color": "blue"}}', encoding="utf-8")
        meets = tmp_path / "meets.json"
        meets.write_text('{"mat": 1}', encoding="utf-8")
        assert main(["--config", str(config), "highlight", str(page),
                     "--meets", str(meets)]) == 0
        assert "--met-color: blue" in capsys.readouterr().out

    def test_keyboard_interrupt(self, page, capsys) -> None:
        """Test interruption exits with 130."""
        with patch("metwords.cli.main.cmd_words", side_effect=KeyboardInterrupt):
            assert main(["words", str(page)]) == 130
        assert "interrupted" in capsys.readouterr().err
