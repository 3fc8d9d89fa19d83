"""Bingo card generation with per-session uniqueness."""

from .core import BingoGeneratorService
from .errors import (
    BingoCardsError,
    ExhaustedUniqueSpace,
    InvalidCount,
    OutOfRange,
    UnsupportedFormat,
)
from .models import BingoCard, GeneratedCell
from .uniqueness import CardRegistry, generate_card_hash
from .version import __version__

__all__ = [
    "BingoCard",
    "BingoCardsError",
    "BingoGeneratorService",
    "CardRegistry",
    "ExhaustedUniqueSpace",
    "GeneratedCell",
    "InvalidCount",
    "OutOfRange",
    "UnsupportedFormat",
    "__version__",
    "generate_card_hash",
]
