"""Per-format cell generation strategies."""

from __future__ import annotations

from typing import Dict, Optional

from ..rng import RandomSource, create_rng, derive_parallel_seed
from .base import CardStrategy
from .strategy_3x9 import Strategy3x9
from .strategy_5x5 import Strategy5x5

__all__ = [
    "CardStrategy",
    "Strategy3x9",
    "Strategy5x5",
    "default_strategies",
    "seeded_strategies",
]

STRATEGY_TYPES = (Strategy5x5, Strategy3x9)


def default_strategies(rng: Optional[RandomSource] = None) -> Dict[str, CardStrategy]:
    strategies = [cls(rng) for cls in STRATEGY_TYPES]
    return {s.format: s for s in strategies}


def seeded_strategies(engine: str, seed: Optional[int]) -> Dict[str, CardStrategy]:
    """One independent RNG per format, derived from `seed` so runs are reproducible.

    With no seed every strategy gets a fresh unseeded source.
    """
    strategies: Dict[str, CardStrategy] = {}
    for index, cls in enumerate(STRATEGY_TYPES):
        format_seed = None if seed is None else derive_parallel_seed(seed, index, cls.format)
        strategies[cls.format] = cls(create_rng(engine, format_seed))
    return strategies
