from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .validation import ValidationIssue, ValidationReport

# severity -> (heading, heading style, border style)
_SEVERITY_STYLES = {
    "error": ("Validation Errors", "bold red", "red"),
    "warning": ("Validation Warnings", "bold yellow", "yellow"),
}


class ValidationFormatter:
    """Prints a :class:`ValidationReport` as one Rich panel per severity."""

    def __init__(self, console: Optional[Console] = None, show_suggestions: bool = True):
        self.console = console or Console()
        self.show_suggestions = show_suggestions

    def format_report(self, report: ValidationReport, *, source: str = "preprocessor.rolltables") -> None:
        for severity, issues in (("error", report.errors), ("warning", report.warnings)):
            if issues:
                self._print_group(severity, issues, source)

        if report.errors:
            return
        suffix = " (with warnings)" if report.warnings else ""
        self.console.print(f"[bold green]✓ Configuration passed validation{suffix}.[/bold green]")

    def _print_group(self, severity: str, issues: List[ValidationIssue], source: str) -> None:
        heading, heading_style, border_style = _SEVERITY_STYLES[severity]
        self.console.print()
        self.console.print(
            f"[{heading_style}]{heading}: {len(issues)} {severity}(s) detected[/{heading_style}]"
        )
        self.console.print(
            Panel(
                self._issues_table(issues),
                title=f"[bold]{escape(source)}[/bold]",
                border_style=border_style,
                padding=(1, 2),
            )
        )

    def _issues_table(self, issues: List[ValidationIssue]) -> Table:
        table = Table.grid(padding=(0, 1))
        table.add_column("Path", style="cyan", overflow="fold")
        table.add_column("Message", overflow="fold")

        for issue in issues:
            message = escape(issue.message)
            if issue.code:
                message = f"{message} [dim]({issue.code})[/dim]"
            table.add_row(escape(issue.path), message)
            if self.show_suggestions and issue.fix_suggestion:
                table.add_row("", Text.assemble(("💡 ", "yellow"), (issue.fix_suggestion, "italic dim")))
        return table


__all__ = [
    "ValidationFormatter",
]
