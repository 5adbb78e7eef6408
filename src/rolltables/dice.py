"""Die selection for roll tables.

Given the number of rows in a table, pick the die (or combination of dice)
used to roll on it. Selection works in tiers and the first tier with a match
wins:

1. a single conventional die whose faces divide evenly between the rows;
2. a single conventional die with only a few spare faces, which are folded
   into the last row (``7 -> d8``);
3. two or more conventional dice rolled together whose outcome count divides
   evenly between the rows (``36 -> d66``); dice with ten or more faces only
   join a combination when the header separates the sizes (``d10.6``), since
   ``d106`` reads as a single die;
4. an unusual die sized exactly to the row count (``23 -> d23``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import combinations_with_replacement

CONVENTIONAL_DICE: tuple[int, ...] = (4, 6, 8, 10, 12, 20, 100)

# Hard cap for combined rolls; anything larger is not a practical table.
MAX_COMBINED_DICE = 3


@dataclass(frozen=True, slots=True)
class DieScheme:
    """One or more dice rolled together, largest die first."""

    sizes: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.sizes:
            raise ValueError("A die scheme needs at least one die")
        if any(size < 1 for size in self.sizes):
            raise ValueError(f"Die sizes must be positive: {self.sizes}")

    @property
    def outcomes(self) -> int:
        return math.prod(self.sizes)

    def unusual_sizes(self, conventional: tuple[int, ...] = CONVENTIONAL_DICE) -> tuple[int, ...]:
        return tuple(size for size in self.sizes if size not in conventional)

    def __str__(self) -> str:
        return "d" + "".join(str(size) for size in self.sizes)


@dataclass(frozen=True, slots=True)
class DiePolicy:
    """Knobs for :func:`select_scheme`.

    Attributes:
        max_dice: Largest number of dice considered for a combined roll.
        conventional: Die sizes that may be picked without falling back to
            an unusual die.
        combine_multi_digit: Let dice with ten or more faces join a
            combined roll. Only safe when the header puts a separator
            between the sizes.
    """

    max_dice: int = 2
    conventional: tuple[int, ...] = CONVENTIONAL_DICE
    combine_multi_digit: bool = False

    @property
    def combinable(self) -> tuple[int, ...]:
        sizes = tuple(sorted(set(self.conventional)))
        if self.combine_multi_digit:
            return sizes
        return tuple(size for size in sizes if size < 10)

    def __post_init__(self) -> None:
        if not 1 <= self.max_dice <= MAX_COMBINED_DICE:
            raise ValueError(f"max_dice must be between 1 and {MAX_COMBINED_DICE}, got {self.max_dice}")
        if not self.conventional or any(size < 2 for size in self.conventional):
            raise ValueError(f"Conventional dice need at least two faces each: {self.conventional}")


DEFAULT_POLICY = DiePolicy()


def fold_allowance(row_count: int) -> int:
    """Spare faces a single die may fold into the last row."""
    return max(1, row_count // 8)


def _exact_single(row_count: int, sizes: tuple[int, ...]) -> int | None:
    for size in sizes:
        if size >= row_count and size % row_count == 0:
            return size
    return None


def _near_single(row_count: int, sizes: tuple[int, ...]) -> int | None:
    allowance = fold_allowance(row_count)
    for size in sizes:
        if 0 < size - row_count <= allowance:
            return size
    return None


def _combination_key(combo: tuple[int, ...]) -> tuple[int, int, int]:
    # Smallest product, then fewest distinct sizes (d66 over d94), then the
    # smallest largest die (d86 over d124).
    return math.prod(combo), len(set(combo)), max(combo)


def _exact_combined(row_count: int, sizes: tuple[int, ...], max_dice: int) -> tuple[int, ...] | None:
    for count in range(2, max_dice + 1):
        matches = [
            combo
            for combo in combinations_with_replacement(sizes, count)
            if math.prod(combo) % row_count == 0
        ]
        if matches:
            best = min(matches, key=_combination_key)
            return tuple(sorted(best, reverse=True))
    return None


def select_scheme(row_count: int, policy: DiePolicy = DEFAULT_POLICY) -> DieScheme:
    """Choose the dice to roll for a table with ``row_count`` rows.

    Raises:
        ValueError: If ``row_count`` is smaller than one.
    """
    if row_count < 1:
        raise ValueError(f"row_count must be at least 1, got {row_count}")

    sizes = tuple(sorted(set(policy.conventional)))

    single = _exact_single(row_count, sizes) or _near_single(row_count, sizes)
    if single is not None:
        return DieScheme((single,))

    combined = _exact_combined(row_count, policy.combinable, policy.max_dice)
    if combined is not None:
        return DieScheme(combined)

    return DieScheme((row_count,))
