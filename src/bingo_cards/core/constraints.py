"""Constraint checking for generated cards."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..models import CELL_FREE, CELL_NUMBER, CardFormatConfig, GeneratedCell
from ..strategies.strategy_3x9 import MAX_PER_COLUMN, MIN_PER_COLUMN, NUMBERS_PER_ROW


class CardConstraintChecker:
    """Checks a cell sequence against a card format's layout rules."""

    def __init__(
        self,
        config: CardFormatConfig,
        *,
        numbers_per_row: Optional[int] = None,
        min_per_column: int = 1,
        max_per_column: Optional[int] = None,
    ):
        self.config = config
        self.numbers_per_row = numbers_per_row
        self.min_per_column = min_per_column
        self.max_per_column = max_per_column if max_per_column is not None else config.rows

    def violations(self, cells: Sequence[GeneratedCell]) -> List[str]:
        """Return a description of every broken rule; empty means valid."""
        cfg = self.config
        problems: List[str] = []

        if len(cells) != cfg.total_cells:
            return [f"expected {cfg.total_cells} cells, got {len(cells)}"]

        for pos, cell in enumerate(cells):
            if cell.index != pos:
                problems.append(f"cell at position {pos} has index {cell.index}")

        free = [c.index for c in cells if c.type == CELL_FREE]
        expected_free = [cfg.free_space_index] if cfg.has_free_space else []
        if free != expected_free:
            problems.append(f"free cells at {free}, expected {expected_free}")

        if self.numbers_per_row is not None:
            for row in range(cfg.rows):
                row_cells = cells[row * cfg.columns:(row + 1) * cfg.columns]
                n = sum(1 for c in row_cells if c.type == CELL_NUMBER)
                if n != self.numbers_per_row:
                    problems.append(f"row {row} holds {n} numbers, expected {self.numbers_per_row}")

        for col_range in cfg.column_ranges:
            col = col_range.column
            column = [cells[row * cfg.columns + col] for row in range(cfg.rows)]
            values = [c.value for c in column if c.type == CELL_NUMBER]
            if not (self.min_per_column <= len(values) <= self.max_per_column):
                problems.append(
                    f"column {col} holds {len(values)} numbers, "
                    f"expected {self.min_per_column}..{self.max_per_column}"
                )
            for v in values:
                if not (col_range.min <= v <= col_range.max):
                    problems.append(f"column {col} value {v} outside [{col_range.min}, {col_range.max}]")
            if any(a >= b for a, b in zip(values, values[1:])):
                problems.append(f"column {col} is not strictly ascending: {values}")

        seen: Dict[int, int] = {}
        for cell in cells:
            if cell.value is None:
                continue
            if cell.value in seen:
                problems.append(f"value {cell.value} repeated at {seen[cell.value]} and {cell.index}")
            seen[cell.value] = cell.index

        return problems

    def verify_card(self, cells: Sequence[GeneratedCell]) -> bool:
        return not self.violations(cells)


def checker_for_format(card_format: str, config: CardFormatConfig) -> CardConstraintChecker:
    if card_format == "3x9":
        return CardConstraintChecker(
            config,
            numbers_per_row=NUMBERS_PER_ROW,
            min_per_column=MIN_PER_COLUMN,
            max_per_column=MAX_PER_COLUMN,
        )
    # 5x5 columns are full except where the free space sits
    min_per_column = config.rows - (1 if config.has_free_space else 0)
    return CardConstraintChecker(config, min_per_column=min_per_column)
