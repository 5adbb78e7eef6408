"""Roll range labels for the first column of a roll table."""

from __future__ import annotations

from dataclasses import dataclass

from .dice import DieScheme

DEFAULT_SEPARATOR = "-"
DEFAULT_HEAD_SEPARATOR = ""


@dataclass(frozen=True, slots=True)
class RollRange:
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    def render(self, separator: str = DEFAULT_SEPARATOR) -> str:
        if self.width == 1:
            return str(self.start)
        return f"{self.start}{separator}{self.end}"


def roll_ranges(row_count: int, scheme: DieScheme) -> list[RollRange]:
    """Split ``1..scheme.outcomes`` into ``row_count`` contiguous ranges.

    Every row gets ``outcomes // row_count`` values; the last row also takes
    whatever is left over.
    """
    if row_count < 1:
        raise ValueError(f"row_count must be at least 1, got {row_count}")
    total = scheme.outcomes
    if total < row_count:
        raise ValueError(f"{scheme} has {total} outcomes, not enough for {row_count} rows")

    width = total // row_count
    ranges = [RollRange(index * width + 1, (index + 1) * width) for index in range(row_count)]
    last = ranges[-1]
    ranges[-1] = RollRange(last.start, total)
    return ranges


def label_for(
    row_index: int,
    row_count: int,
    scheme: DieScheme,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Return the roll label of one row, e.g. ``"3"`` or ``"7-8"``."""
    if not 0 <= row_index < row_count:
        raise IndexError(f"row_index {row_index} outside 0..{row_count - 1}")
    return roll_ranges(row_count, scheme)[row_index].render(separator)


def row_labels(row_count: int, scheme: DieScheme, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    return [roll_range.render(separator) for roll_range in roll_ranges(row_count, scheme)]


def header_label(scheme: DieScheme, head_separator: str = DEFAULT_HEAD_SEPARATOR) -> str:
    """Render the die column header: ``d66``, ``d6.6`` or ``d20``."""
    return "d" + head_separator.join(str(size) for size in scheme.sizes)
