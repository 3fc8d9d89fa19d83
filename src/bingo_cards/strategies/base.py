"""Common contract for per-format cell generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CELL_BLANK, CELL_FREE, CELL_NUMBER, CardFormatConfig, GeneratedCell
from ..rng import RandomSource


class CardStrategy(ABC):
    """Produces one candidate grid per call. Uniqueness is not its concern."""

    format: str
    config: CardFormatConfig

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = rng

    @abstractmethod
    def generate_cells(self) -> List[GeneratedCell]:
        raise NotImplementedError

    @staticmethod
    def number_cell(index: int, value: int) -> GeneratedCell:
        return GeneratedCell(index=index, type=CELL_NUMBER, value=value)

    @staticmethod
    def free_cell(index: int) -> GeneratedCell:
        return GeneratedCell(index=index, type=CELL_FREE)

    @staticmethod
    def blank_cell(index: int) -> GeneratedCell:
        return GeneratedCell(index=index, type=CELL_BLANK)
