from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from .transformer import TransformStats

# Color constants for status indicators
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
DIM_COLOR = "dim"

SUCCESS_SYMBOL = "✓"
WARNING_SYMBOL = "⚠"
ERROR_SYMBOL = "✗"


class SummaryTableRenderer:
    """Renders transform statistics as Rich Tables with color-coded status indicators."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    @staticmethod
    def _colorize_value_with_symbol(value: int, *, is_error: bool = False, is_warning: bool = False) -> str:
        if value == 0:
            return f"[{DIM_COLOR}]{value}[/{DIM_COLOR}]"
        if is_error:
            color, symbol = ERROR_COLOR, ERROR_SYMBOL
        elif is_warning:
            color, symbol = WARNING_COLOR, WARNING_SYMBOL
        else:
            color, symbol = SUCCESS_COLOR, SUCCESS_SYMBOL
        return f"[{color}]{symbol} {value}[/{color}]"

    def render_summary_table(self, stats: TransformStats) -> Table:
        table = Table(title="Roll Tables", show_header=True, header_style="bold")

        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Count", justify="right")

        table.add_row("Tables seen", f"{stats.tables_seen}")
        table.add_row("Filled", self._colorize_value_with_symbol(stats.tables_transformed))
        table.add_row("Warnings", self._colorize_value_with_symbol(len(stats.warnings), is_warning=True))
        table.add_row("Failed", self._colorize_value_with_symbol(stats.failed, is_error=True))
        return table

    def render_tables_detail(self, stats: TransformStats) -> Table:
        """One row per filled table: where it is, how many rows, which dice."""
        table = Table(title="Filled Tables", show_header=True, header_style="bold")

        table.add_column("Location", style="cyan", overflow="fold")
        table.add_column("Rows", justify="right")
        table.add_column("Dice", no_wrap=True)

        for entry in stats.transformed:
            dice = str(entry.scheme)
            if entry.unusual:
                dice = f"[{WARNING_COLOR}]{WARNING_SYMBOL} {dice}[/{WARNING_COLOR}]"
            table.add_row(str(entry.location), str(entry.rows), dice)
        return table

    def print_summary(self, stats: TransformStats) -> None:
        self.console.print(self.render_summary_table(stats))
        if stats.transformed:
            self.console.print(self.render_tables_detail(stats))
