"""Number/blank layout solver for the 90-ball grid.

Decides which cells of a rows x columns grid hold numbers so that every row
holds exactly `per_row` numbers and every column holds between `min_per_column`
and `max_per_column`. Values are chosen later by the strategy.
"""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Sequence

from .errors import BingoCardsError
from .feasibility import check_assignment_capacity, check_column_counts
from .rng import RandomSource, random_int, shuffle

logger = logging.getLogger(__name__)


class LayoutError(BingoCardsError, RuntimeError):
    pass


def distribute_column_counts(
    *,
    columns: int,
    total: int,
    min_per_column: int,
    max_per_column: int,
    rng: Optional[RandomSource] = None,
) -> List[int]:
    """Seed every column with the minimum, then hand out extras one at a time."""
    counts = [min_per_column] * columns
    extras = total - min_per_column * columns
    if extras < 0 or extras > (max_per_column - min_per_column) * columns:
        raise LayoutError(
            f"{total} numbers cannot be spread over {columns} columns "
            f"with {min_per_column}..{max_per_column} per column"
        )
    for _ in range(extras):
        open_cols = [j for j, c in enumerate(counts) if c < max_per_column]
        col = open_cols[random_int(0, len(open_cols) - 1, rng)]
        counts[col] += 1
    return counts


def _try_assign(
    column_counts: Sequence[int], per_row: int, rows: int, rng: Optional[RandomSource]
) -> Optional[List[List[bool]]]:
    grid = [[False] * len(column_counts) for _ in range(rows)]
    capacity = [per_row] * rows
    pending = {j: c for j, c in enumerate(column_counts)}

    for col in shuffle(range(len(column_counts)), rng):
        need = pending.pop(col)
        open_rows = [r for r in range(rows) if capacity[r] > 0]
        choices = shuffle(list(itertools.combinations(open_rows, need)), rng)
        placed = False
        for chosen in choices:
            after = [cap - (1 if r in chosen else 0) for r, cap in enumerate(capacity)]
            if check_assignment_capacity(list(pending.values()), after).feasible:
                for r in chosen:
                    grid[r][col] = True
                capacity = after
                placed = True
                break
        if not placed:
            return None
    return grid


def assign_rows(
    column_counts: Sequence[int],
    *,
    rows: int,
    per_row: int,
    rng: Optional[RandomSource] = None,
    max_restarts: int = 50,
) -> List[List[bool]]:
    """Randomized greedy row assignment with restart on a dead end.

    Returns a rows x columns grid where True marks a number cell.
    """
    check = check_assignment_capacity(column_counts, [per_row] * rows)
    if not check.feasible:
        raise LayoutError("; ".join(check.reasons))

    for restart in range(max_restarts):
        grid = _try_assign(column_counts, per_row, rows, rng)
        if grid is not None:
            if restart:
                logger.debug("row assignment succeeded after %d restarts", restart)
            return grid
    logger.warning("row assignment failed after %d restarts", max_restarts)
    raise LayoutError(f"Could not assign rows within {max_restarts} restarts")


def build_layout(
    *,
    rows: int,
    columns: int,
    per_row: int,
    min_per_column: int,
    max_per_column: int,
    rng: Optional[RandomSource] = None,
) -> List[List[bool]]:
    total = rows * per_row
    counts = distribute_column_counts(
        columns=columns,
        total=total,
        min_per_column=min_per_column,
        max_per_column=max_per_column,
        rng=rng,
    )
    check = check_column_counts(
        counts, total=total, min_per_column=min_per_column, max_per_column=max_per_column
    )
    if not check.feasible:
        raise LayoutError("; ".join(check.reasons))
    return assign_rows(counts, rows=rows, per_row=per_row, rng=rng)
