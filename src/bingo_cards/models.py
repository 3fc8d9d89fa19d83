from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

CELL_NUMBER = "number"
CELL_BLANK = "blank"
CELL_FREE = "free"
CELL_TYPES = (CELL_NUMBER, CELL_BLANK, CELL_FREE)


@dataclass(frozen=True)
class GeneratedCell:
    index: int
    type: str
    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.type not in CELL_TYPES:
            raise ValueError(f"Unknown cell type: {self.type}")
        if (self.value is not None) != (self.type == CELL_NUMBER):
            raise ValueError(f"Cell {self.index}: value must be set iff type is 'number'")

    def to_dict(self) -> Dict[str, object]:
        return {"index": self.index, "type": self.type, "value": self.value}


@dataclass(frozen=True)
class ColumnRange:
    column: int
    min: int
    max: int

    @property
    def size(self) -> int:
        return self.max - self.min + 1


@dataclass(frozen=True)
class CardFormatConfig:
    rows: int
    columns: int
    column_ranges: Tuple[ColumnRange, ...]
    has_free_space: bool = False
    free_space_index: Optional[int] = None

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns


@dataclass
class BingoCard:
    """A generated card. The core keeps only its hash once issued."""

    id: str
    format: str
    session_id: str
    cells: List[GeneratedCell]
    hash: str
    created_at: datetime

    def numbers(self) -> List[int]:
        return [c.value for c in self.cells if c.value is not None]


@dataclass
class GenerateCardsRequest:
    count: int
    format: str = "5x5"


@dataclass
class GenerateCardsResponse:
    session_id: str
    generated_count: int
    cards: List[BingoCard] = field(default_factory=list)
