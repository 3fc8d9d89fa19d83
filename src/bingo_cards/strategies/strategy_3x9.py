from __future__ import annotations

from typing import List, Optional

from ..layout import build_layout
from ..models import CardFormatConfig, ColumnRange, GeneratedCell
from ..rng import unique_random_in_range
from .base import CardStrategy

NUMBERS_PER_ROW = 5
MIN_PER_COLUMN = 1
MAX_PER_COLUMN = 3


class Strategy3x9(CardStrategy):
    """90-ball card: 3 rows of 5 numbers and 4 blanks, no free space.

    Built in three stages: per-column counts, row/column placement, then
    values drawn per column and laid out top to bottom in ascending order.
    """

    format = "3x9"
    config = CardFormatConfig(
        rows=3,
        columns=9,
        has_free_space=False,
        column_ranges=(
            ColumnRange(column=0, min=1, max=9),
            ColumnRange(column=1, min=10, max=19),
            ColumnRange(column=2, min=20, max=29),
            ColumnRange(column=3, min=30, max=39),
            ColumnRange(column=4, min=40, max=49),
            ColumnRange(column=5, min=50, max=59),
            ColumnRange(column=6, min=60, max=69),
            ColumnRange(column=7, min=70, max=79),
            ColumnRange(column=8, min=80, max=90),
        ),
    )

    def generate_cells(self) -> List[GeneratedCell]:
        cfg = self.config
        layout = build_layout(
            rows=cfg.rows,
            columns=cfg.columns,
            per_row=NUMBERS_PER_ROW,
            min_per_column=MIN_PER_COLUMN,
            max_per_column=MAX_PER_COLUMN,
            rng=self.rng,
        )

        cells: List[Optional[GeneratedCell]] = [None] * cfg.total_cells
        for rng_def in cfg.column_ranges:
            col = rng_def.column
            rows_used = [r for r in range(cfg.rows) if layout[r][col]]
            values = sorted(
                unique_random_in_range(rng_def.min, rng_def.max, len(rows_used), self.rng)
            )
            for row, value in zip(rows_used, values):
                idx = row * cfg.columns + col
                cells[idx] = self.number_cell(idx, value)

        return [c if c is not None else self.blank_cell(i) for i, c in enumerate(cells)]
