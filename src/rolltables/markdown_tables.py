"""Minimal GitHub-flavoured pipe table scanner.

Only the shape needed to recognise and rewrite a roll table is modelled: a
header row, a delimiter row and the body rows that follow it. Tables are kept
as their raw source lines together with the character span of every cell, so
rewriting one cell leaves every other byte of the document untouched.

Tables inside fenced code blocks and indented code blocks are skipped.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, replace

_FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_DELIMITER_CELL_PATTERN = re.compile(r"^\s*:?-+:?\s*$")
# Lines that open another block and so end a table body.
_BLOCK_START_PATTERN = re.compile(
    r"^ {0,3}(?:"
    r"#{1,6}(?:[ \t]|$)"
    r"|>"
    r"|[-+*](?:[ \t]|$)"
    r"|\d{1,9}[.)](?:[ \t]|$)"
    r"|(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$"
    r"|<(?:!--|\?|![A-Za-z]|!\[CDATA\[|/?(?:address|article|aside|blockquote|details|div|dl|figure|footer|form"
    r"|h[1-6]|header|hr|nav|ol|p|pre|script|section|style|table|textarea|ul)(?:[ \t/>]|$))"
    r")"
)
# Markdown only breaks lines on \n, \r\n and \r; str.splitlines knows many more.
_LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")

TableCallback = Callable[["MarkdownTable"], "MarkdownTable | None"]


@dataclass(frozen=True, slots=True)
class TableCell:
    """A cell of one table line; ``start``/``end`` index the line body."""

    raw: str
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.raw.strip()

    @property
    def is_blank(self) -> bool:
        return not self.text


@dataclass(frozen=True, slots=True)
class TableRow:
    body: str
    newline: str
    cells: tuple[TableCell, ...]

    @classmethod
    def parse(cls, line: str) -> "TableRow":
        body = line.rstrip("\r\n")
        return cls(body=body, newline=line[len(body):], cells=tuple(split_cells(body)))

    @property
    def line(self) -> str:
        return self.body + self.newline

    @property
    def first_cell(self) -> TableCell:
        return self.cells[0]

    def replace_first_cell(self, text: str) -> "TableRow":
        cell = self.first_cell
        new_raw = _pad_like(cell.raw, escape_cell(text))
        return TableRow.parse(self.body[: cell.start] + new_raw + self.body[cell.end :] + self.newline)


@dataclass(frozen=True, slots=True)
class MarkdownTable:
    """A pipe table found in a markdown document.

    Attributes:
        line_number: 1-based line of the header row in the scanned document.
        header: The header row.
        delimiter: The raw delimiter line (``|:---:|:---|``), kept verbatim.
        rows: Body rows in document order.
    """

    line_number: int
    header: TableRow
    delimiter: str
    rows: tuple[TableRow, ...]

    @property
    def line_count(self) -> int:
        return 2 + len(self.rows)

    def lines(self) -> list[str]:
        return [self.header.line, self.delimiter, *(row.line for row in self.rows)]

    def render(self) -> str:
        return "".join(self.lines())

    def with_first_column(self, head: str, labels: Sequence[str]) -> "MarkdownTable":
        """Return a copy with the first column replaced.

        Raises:
            ValueError: If ``labels`` does not have one entry per body row.
        """
        if len(labels) != len(self.rows):
            raise ValueError(f"Expected {len(self.rows)} labels, got {len(labels)}")
        return replace(
            self,
            header=self.header.replace_first_cell(head),
            rows=tuple(row.replace_first_cell(label) for row, label in zip(self.rows, labels)),
        )


def _is_escaped(text: str, index: int) -> bool:
    backslashes = 0
    index -= 1
    while index >= 0 and text[index] == "\\":
        backslashes += 1
        index -= 1
    return backslashes % 2 == 1


def _pipe_positions(body: str) -> list[int]:
    return [index for index, char in enumerate(body) if char == "|" and not _is_escaped(body, index)]


def split_cells(body: str) -> list[TableCell]:
    """Split one table line (without its line ending) into cells.

    Leading and trailing pipes are optional, ``\\|`` is not a separator.
    """
    pipes = _pipe_positions(body)
    content_start = len(body) - len(body.lstrip())
    content_end = len(body.rstrip())

    boundaries = list(pipes)
    start = 0
    end = len(body)
    if boundaries and boundaries[0] == content_start:
        start = boundaries.pop(0) + 1
    if boundaries and boundaries[-1] == content_end - 1:
        end = boundaries.pop()

    cells = []
    for boundary in boundaries:
        cells.append(TableCell(body[start:boundary], start, boundary))
        start = boundary + 1
    cells.append(TableCell(body[start:end], start, end))
    return cells


def escape_cell(text: str) -> str:
    return re.sub(r"(?<!\\)\|", r"\\|", text)


def _pad_like(raw: str, text: str) -> str:
    if not raw.strip():
        return f" {text} " if raw else text
    leading = raw[: len(raw) - len(raw.lstrip())]
    trailing = raw[len(raw.rstrip()) :]
    return f"{leading}{text}{trailing}"


def split_lines(text: str) -> list[str]:
    """Split ``text`` into lines, keeping each line ending."""
    return _LINE_PATTERN.findall(text)


def _is_blank(line: str) -> bool:
    return not line.strip(" \t\r\n")


def _is_indented_code(line: str) -> bool:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip(" ")) >= 4


def _looks_like_row(line: str) -> bool:
    return not _is_blank(line) and bool(_pipe_positions(line.rstrip("\r\n")))


def _starts_block(line: str) -> bool:
    return bool(_FENCE_PATTERN.match(line) or _BLOCK_START_PATTERN.match(line.rstrip("\r\n")))


def _is_delimiter(line: str, column_count: int) -> bool:
    body = line.rstrip("\r\n")
    # A pipe-less "---" is a setext underline or a thematic break.
    if "-" not in body or _is_indented_code(body) or not _pipe_positions(body):
        return False
    cells = split_cells(body)
    if len(cells) != column_count:
        return False
    return all(_DELIMITER_CELL_PATTERN.match(cell.raw) for cell in cells)


def _try_table(lines: Sequence[str], index: int) -> MarkdownTable | None:
    header_line = lines[index]
    if index + 1 >= len(lines) or _is_indented_code(header_line) or not _looks_like_row(header_line):
        return None
    header = TableRow.parse(header_line)
    delimiter = lines[index + 1]
    if not _is_delimiter(delimiter, len(header.cells)):
        return None

    rows = []
    cursor = index + 2
    while cursor < len(lines):
        line = lines[cursor]
        # Any other non-blank line continues the body, pipes or not.
        if _is_blank(line) or _starts_block(line):
            break
        rows.append(TableRow.parse(line))
        cursor += 1
    return MarkdownTable(line_number=index + 1, header=header, delimiter=delimiter, rows=tuple(rows))


def _scan(lines: Sequence[str]) -> Iterator[MarkdownTable]:
    fence: str | None = None
    index = 0
    while index < len(lines):
        line = lines[index]
        match = _FENCE_PATTERN.match(line)
        if fence is not None:
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
                fence = None
            index += 1
            continue
        if match:
            fence = match.group(1)
            index += 1
            continue

        table = _try_table(lines, index)
        if table is None:
            index += 1
            continue
        yield table
        index += table.line_count


def find_tables(text: str) -> list[MarkdownTable]:
    """Return every pipe table of ``text`` outside code blocks."""
    return list(_scan(split_lines(text)))


def rewrite_tables(text: str, callback: TableCallback) -> str:
    """Offer every table of ``text`` to ``callback`` and splice replacements in.

    ``callback`` returns a replacement table with the same number of lines,
    or ``None`` to keep the table as it is. Everything outside replaced
    tables is returned byte for byte.
    """
    lines = split_lines(text)
    tables = list(_scan(lines))
    if not tables:
        return text

    output: list[str] = []
    cursor = 0
    for table in tables:
        start = table.line_number - 1
        output.extend(lines[cursor:start])
        replacement = callback(table)
        if replacement is None or replacement.line_count != table.line_count:
            output.extend(lines[start : start + table.line_count])
        else:
            output.extend(replacement.lines())
        cursor = start + table.line_count
    output.extend(lines[cursor:])
    return "".join(output)
