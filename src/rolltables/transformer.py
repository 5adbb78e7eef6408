"""Filling in roll tables.

A roll table is marked by a first column whose header is exactly ``d`` and
whose body cells are all empty::

    |d|Class|
    |:---:|:---|
    ||Warrior|
    ||Thief|
    ||Wizard|

becomes::

    |d6|Class|
    |:---:|:---|
    |1-2|Warrior|
    |3-4|Thief|
    |5-6|Wizard|

Any other table is returned as it is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .book import TableLocation
from .config import RollTablesConfig
from .dice import DieScheme, select_scheme
from .errors import TableStructureError
from .labels import header_label, row_labels
from .markdown_tables import MarkdownTable

LOGGER = logging.getLogger(__name__)

ROLL_MARKER = "d"


@dataclass(slots=True)
class TransformedTable:
    location: TableLocation
    rows: int
    scheme: DieScheme
    unusual: tuple[int, ...] = ()


@dataclass(slots=True)
class TransformStats:
    tables_seen: int = 0
    transformed: list[TransformedTable] = field(default_factory=list)
    failed: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def tables_transformed(self) -> int:
        return len(self.transformed)


def has_roll_marker(table: MarkdownTable) -> bool:
    return table.header.first_cell.text == ROLL_MARKER


def has_blank_roll_column(table: MarkdownTable) -> bool:
    return all(row.first_cell.is_blank for row in table.rows)


def is_roll_table(table: MarkdownTable) -> bool:
    """Whether ``table`` asks to have its roll column filled in."""
    return has_roll_marker(table) and has_blank_roll_column(table) and bool(table.rows)


class TableTransformer:
    """Rewrites roll tables; usable directly as a :class:`~rolltables.book.TableVisitor`."""

    def __init__(self, config: RollTablesConfig | None = None) -> None:
        self.config = config or RollTablesConfig()
        self.stats = TransformStats()

    def transform(self, table: MarkdownTable, location: TableLocation | None = None) -> MarkdownTable:
        """Return the filled-in table, or ``table`` itself when it is not a roll table."""
        location = location or TableLocation(line=table.line_number)
        self.stats.tables_seen += 1

        if not has_roll_marker(table) or not has_blank_roll_column(table):
            return table

        try:
            scheme, filled = self._fill(table)
        except TableStructureError as exc:
            LOGGER.debug("Leaving roll table at %s unchanged: %s", location, exc)
            return table
        except ValueError as exc:
            self.stats.failed += 1
            LOGGER.error("Could not fill roll table at %s, leaving it unchanged: %s", location, exc)
            return table

        unusual = scheme.unusual_sizes(self.config.dice)
        self.stats.transformed.append(
            TransformedTable(location=location, rows=len(table.rows), scheme=scheme, unusual=unusual)
        )
        if self.config.warn_unusual_dice and unusual:
            self._warn_unusual(unusual, location)
        return filled

    def visit(self, table: MarkdownTable, location: TableLocation) -> MarkdownTable | None:
        transformed = self.transform(table, location)
        return None if transformed is table else transformed

    def _fill(self, table: MarkdownTable) -> tuple[DieScheme, MarkdownTable]:
        row_count = len(table.rows)
        if row_count == 0:
            raise TableStructureError("table has a header but no rows")

        scheme = select_scheme(row_count, self.config.policy)
        head = header_label(scheme, self.config.head_separator)
        labels = row_labels(row_count, scheme, self.config.separator)
        return scheme, table.with_first_column(head, labels)

    def _warn_unusual(self, unusual: tuple[int, ...], location: TableLocation) -> None:
        dice = ", ".join(f"d{size}" for size in unusual)
        message = f"Roll table at {location} uses unusual dice: {dice}"
        self.stats.warnings.append(message)
        LOGGER.warning(message)
