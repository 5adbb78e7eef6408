from __future__ import annotations

import io

from rich.console import Console

from rolltables.book import TableLocation
from rolltables.dice import DieScheme
from rolltables.summary_table import (
    DIM_COLOR,
    ERROR_COLOR,
    ERROR_SYMBOL,
    SUCCESS_COLOR,
    SUCCESS_SYMBOL,
    WARNING_COLOR,
    WARNING_SYMBOL,
    SummaryTableRenderer,
)
from rolltables.transformer import TransformedTable, TransformStats


def _stats() -> TransformStats:
    stats = TransformStats(tables_seen=4, failed=1)
    stats.transformed.append(
        TransformedTable(location=TableLocation(line=3, path="classes.md"), rows=36, scheme=DieScheme((6, 6)))
    )
    stats.transformed.append(
        TransformedTable(
            location=TableLocation(line=9, path="weird.md"),
            rows=13,
            scheme=DieScheme((13,)),
            unusual=(13,),
        )
    )
    stats.warnings.append("Roll table at weird.md:9 uses unusual dice: d13")
    return stats


def _render(renderable) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=120).print(renderable)
    return buffer.getvalue()


class TestColorHelpers:
    """Test color and symbol helper methods."""

    def test_zero_is_dim(self) -> None:
        assert SummaryTableRenderer._colorize_value_with_symbol(0, is_error=True) == f"[{DIM_COLOR}]0[/{DIM_COLOR}]"

    def test_success(self) -> None:
        result = SummaryTableRenderer._colorize_value_with_symbol(2)
        assert result == f"[{SUCCESS_COLOR}]{SUCCESS_SYMBOL} 2[/{SUCCESS_COLOR}]"

    def test_warning(self) -> None:
        result = SummaryTableRenderer._colorize_value_with_symbol(1, is_warning=True)
        assert result == f"[{WARNING_COLOR}]{WARNING_SYMBOL} 1[/{WARNING_COLOR}]"

    def test_error(self) -> None:
        result = SummaryTableRenderer._colorize_value_with_symbol(3, is_error=True)
        assert result == f"[{ERROR_COLOR}]{ERROR_SYMBOL} 3[/{ERROR_COLOR}]"


class TestSummaryTable:
    def test_counts(self) -> None:
        table = SummaryTableRenderer().render_summary_table(_stats())

        assert table.title == "Roll Tables"
        assert table.row_count == 4
        output = _render(table)
        assert "Tables seen" in output
        assert f"{SUCCESS_SYMBOL} 2" in output
        assert f"{WARNING_SYMBOL} 1" in output
        assert f"{ERROR_SYMBOL} 1" in output

    def test_empty_stats(self) -> None:
        output = _render(SummaryTableRenderer().render_summary_table(TransformStats()))
        assert SUCCESS_SYMBOL not in output


class TestTablesDetail:
    def test_one_row_per_table(self) -> None:
        table = SummaryTableRenderer().render_tables_detail(_stats())
        assert table.row_count == 2

        output = _render(table)
        assert "classes.md:3" in output
        assert "d66" in output
        assert f"{WARNING_SYMBOL} d13" in output


class TestPrintSummary:
    def test_prints_both_tables(self) -> None:
        buffer = io.StringIO()
        SummaryTableRenderer(Console(file=buffer, width=120)).print_summary(_stats())

        output = buffer.getvalue()
        assert "Roll Tables" in output
        assert "Filled Tables" in output

    def test_skips_detail_without_filled_tables(self) -> None:
        buffer = io.StringIO()
        SummaryTableRenderer(Console(file=buffer, width=120)).print_summary(TransformStats(tables_seen=2))

        assert "Filled Tables" not in buffer.getvalue()
