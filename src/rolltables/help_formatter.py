from __future__ import annotations

import argparse
import shutil
from collections.abc import Iterable, Sequence

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .command_help import get_command_help

Example = tuple[str, str]


def _is_book_toml(command: str) -> bool:
    return command.startswith("[") or " = " in command


def _examples_grid(examples: Sequence[Example], prompt: str, command_style: str) -> Table:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(justify="right", style="dim cyan", no_wrap=True)
    grid.add_column()
    for number, (description, command) in enumerate(examples, 1):
        grid.add_row(f"{number}.", Text(description, style="bright_white"))
        grid.add_row("", Text(f"{prompt}{command}", style=command_style))
    return grid


class RichHelpFormatter(argparse.HelpFormatter):
    """
    Argparse formatter that appends examples, environment variables and
    tips below the usual help when writing to a terminal.

    Redirected help (mdBook logs, CI) stays plain argparse text.
    """

    def __init__(
        self,
        prog: str,
        indent_increment: int = 2,
        max_help_position: int = 24,
        width: int | None = None,
        console: Console | None = None,
    ) -> None:
        super().__init__(
            prog=prog,
            indent_increment=indent_increment,
            max_help_position=max_help_position,
            width=width or min(shutil.get_terminal_size().columns, 120),
        )
        self.console = console or Console()
        self._examples: list[Example] = []
        self._env_vars: list[tuple[str, str]] = []
        self._tips: list[str] = []

    def add_examples(self, examples: list[Example]) -> None:
        self._examples = examples

    def add_environment_variables(self, env_vars: list[tuple[str, str]]) -> None:
        self._env_vars = env_vars

    def add_tips(self, tips: list[str]) -> None:
        self._tips = tips

    def format_help(self) -> str:
        standard_help = super().format_help()
        if not self.console.is_terminal:
            return standard_help
        return "\n".join([standard_help, *self._extra_sections()])

    def _extra_sections(self) -> Iterable[str]:
        if self._examples:
            yield self._capture(
                "📚 Examples:",
                _examples_grid(self._examples, "$ ", "bright_yellow"),
                Text("Run with --examples for the full list", style="dim italic bright_blue"),
            )
        if self._env_vars:
            env_table = Table.grid(padding=(0, 2))
            env_table.add_column(style="bright_green bold", no_wrap=True)
            env_table.add_column(style="bright_white")
            for name, description in self._env_vars:
                env_table.add_row(name, description)
            yield self._capture("🔧 Environment Variables:", env_table)
        if self._tips:
            yield self._capture("💡 Tips:", *(Text(f"• {tip}", style="bright_white") for tip in self._tips))

    def _capture(self, heading: str, *renderables: RenderableType) -> str:
        with self.console.capture() as capture:
            self.console.print(Text(heading, style="bold bright_cyan"))
            for renderable in renderables:
                self.console.print(renderable)
        return capture.get()


def formatter_for(command: str) -> type[RichHelpFormatter]:
    """Build a formatter class preloaded with the help content of ``command``."""
    help_content = get_command_help(command)

    class _CommandHelpFormatter(RichHelpFormatter):
        def __init__(self, prog: str, **kwargs) -> None:
            super().__init__(prog, **kwargs)
            self.add_examples(help_content.brief_examples)
            self.add_environment_variables(help_content.env_vars)
            self.add_tips(help_content.tips)

    return _CommandHelpFormatter


def render_extended_examples(
    command_name: str,
    examples: list[Example],
    console: Console | None = None,
) -> None:
    """Print every example of a command, ``book.toml`` snippets before shell commands."""
    console = console or Console()

    console.print(
        Panel(
            Text.assemble(("📚 Extended Examples: ", "bold bright_white"), (f"rolltables {command_name}", "bold")),
            border_style="bright_cyan",
        )
    )

    book_toml = [example for example in examples if _is_book_toml(example[1])]
    shell = [example for example in examples if not _is_book_toml(example[1])]
    for heading, items, prompt, style in (
        ("📖 book.toml", book_toml, "", "bright_magenta"),
        ("💻 Command-Line Interface", shell, "$ ", "bright_green"),
    ):
        if items:
            console.print(Text(heading, style="bold bright_yellow"))
            console.print(_examples_grid(items, prompt, style))
            console.print()

    console.print(Text("Use --help for the short version.", style="dim"))
