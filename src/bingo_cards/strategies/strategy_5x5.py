from __future__ import annotations

from typing import List, Optional

from ..models import CardFormatConfig, ColumnRange, GeneratedCell
from ..rng import unique_random_in_range
from .base import CardStrategy


class Strategy5x5(CardStrategy):
    """75-ball card: B I N G O columns of 15 values each, free centre."""

    format = "5x5"
    config = CardFormatConfig(
        rows=5,
        columns=5,
        has_free_space=True,
        free_space_index=12,
        column_ranges=(
            ColumnRange(column=0, min=1, max=15),
            ColumnRange(column=1, min=16, max=30),
            ColumnRange(column=2, min=31, max=45),
            ColumnRange(column=3, min=46, max=60),
            ColumnRange(column=4, min=61, max=75),
        ),
    )

    def generate_cells(self) -> List[GeneratedCell]:
        cfg = self.config
        cells: List[Optional[GeneratedCell]] = [None] * cfg.total_cells
        for rng_def in cfg.column_ranges:
            col = rng_def.column
            values = sorted(unique_random_in_range(rng_def.min, rng_def.max, cfg.rows, self.rng))
            for row, value in enumerate(values):
                idx = row * cfg.columns + col
                if idx == cfg.free_space_index:
                    # the N column gives up its middle number to the free space
                    cells[idx] = self.free_cell(idx)
                else:
                    cells[idx] = self.number_cell(idx, value)
        return [c for c in cells if c is not None]
