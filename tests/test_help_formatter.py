from __future__ import annotations

import argparse
from io import StringIO

import pytest
from rich.console import Console

from rolltables.cli import build_parser
from rolltables.command_help import (
    COMMAND_HELP,
    CommandHelp,
    get_command_help,
)
from rolltables.help_formatter import RichHelpFormatter, formatter_for, render_extended_examples


class TestCommandHelp:
    """Test the CommandHelp dataclass and data integrity."""

    def test_command_help_empty_defaults(self) -> None:
        """Test that CommandHelp has empty list defaults for all fields."""
        help_content = CommandHelp()

        assert help_content.brief_examples == []
        assert help_content.extended_examples == []
        assert help_content.env_vars == []
        assert help_content.tips == []

    @pytest.mark.parametrize("command", ["preprocess", "supports", "render", "validate-config"])
    def test_every_command_has_examples(self, command) -> None:
        help_content = get_command_help(command)

        assert isinstance(help_content, CommandHelp)
        assert help_content.brief_examples
        assert help_content.extended_examples
        assert help_content.tips

    def test_brief_examples_are_subset_of_extended(self) -> None:
        for name, help_content in COMMAND_HELP.items():
            for example in help_content.brief_examples:
                assert example in help_content.extended_examples, name

    def test_unknown_command(self) -> None:
        with pytest.raises(KeyError):
            get_command_help("publish")

    def test_preprocess_documents_version_override(self) -> None:
        names = [name for name, _ in get_command_help("preprocess").env_vars]
        assert "ROLLTABLES_IGNORE_VERSION" in names
        assert "ROLLTABLES_LOG_LEVEL" in names


class TestRichHelpFormatter:
    """Test the RichHelpFormatter output."""

    def _formatter(self, *, terminal: bool) -> RichHelpFormatter:
        console = Console(file=StringIO(), force_terminal=terminal, width=100)
        formatter = RichHelpFormatter("rolltables", width=100, console=console)
        formatter.add_usage(None, [], [])
        formatter.add_examples([("Preview a chapter", "rolltables render src/loot.md")])
        formatter.add_environment_variables([("ROLLTABLES_LOG_LEVEL", "Log level")])
        formatter.add_tips(["Diagnostics go to stderr"])
        return formatter

    def test_plain_output_when_not_a_terminal(self) -> None:
        output = self._formatter(terminal=False).format_help()

        assert "usage: rolltables" in output
        assert "Examples" not in output

    def test_rich_sections_on_a_terminal(self) -> None:
        output = self._formatter(terminal=True).format_help()

        assert "Examples" in output
        assert "rolltables render src/loot.md" in output
        assert "ROLLTABLES_LOG_LEVEL" in output
        assert "Diagnostics go to stderr" in output

    def test_formatter_for_preloads_command_help(self) -> None:
        formatter_class = formatter_for("supports")
        formatter = formatter_class("rolltables supports")

        assert issubclass(formatter_class, RichHelpFormatter)
        assert formatter._examples == get_command_help("supports").brief_examples
        assert formatter._tips == get_command_help("supports").tips


class TestParserHelp:
    def test_help_lists_subcommands(self, capsys) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--help"])

        output = capsys.readouterr().out
        for command in ("supports", "render", "validate-config"):
            assert command in output

    def test_subcommand_formatter(self) -> None:
        parser = build_parser()
        subparsers = next(action for action in parser._actions if isinstance(action, argparse._SubParsersAction))
        render = subparsers.choices["render"]

        assert issubclass(render.formatter_class, RichHelpFormatter)
        assert "--separator" in render.format_help()


class TestRenderExtendedExamples:
    def test_splits_book_toml_from_shell(self) -> None:
        buffer = StringIO()
        console = Console(file=buffer, width=120)

        render_extended_examples("preprocess", get_command_help("preprocess").extended_examples, console=console)

        output = buffer.getvalue()
        assert "rolltables preprocess" in output
        assert "book.toml" in output
        assert "Command-Line Interface" in output
        assert "[preprocessor.rolltables]" in output
        assert "$ mdbook build" in output
        assert '$ separator = ","' not in output

    def test_skips_empty_sections(self) -> None:
        buffer = StringIO()
        render_extended_examples("supports", [("Ask", "rolltables supports html")], console=Console(file=buffer))

        output = buffer.getvalue()
        assert "$ rolltables supports html" in output
        assert "📖 book.toml" not in output
