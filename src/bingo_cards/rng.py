from __future__ import annotations

import hashlib
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from .errors import OutOfRange

try:  # optional dependency
    import numpy as _np  # type: ignore
except Exception:  # pragma: no cover - optional
    _np = None


T = TypeVar("T")


@dataclass
class RandomSource:
    engine: str

    def randint(self, a: int, b: int) -> int:
        raise NotImplementedError


class PyRandomSource(RandomSource):
    def __init__(self, seed: Optional[int] = None):
        super().__init__(engine="py_random")
        self._rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


class NumpyPCG64Source(RandomSource):  # pragma: no cover - covered when numpy present
    def __init__(self, seed: Optional[int] = None):
        if _np is None:
            raise RuntimeError("numpy is not installed; install bingo-cards[pcg]")
        super().__init__(engine="numpy_pcg64")
        self._rng = _np.random.Generator(_np.random.PCG64(seed))

    def randint(self, a: int, b: int) -> int:
        return int(self._rng.integers(low=a, high=b + 1))


def create_rng(engine: str, seed: Optional[int] = None) -> RandomSource:
    engine = (engine or "py_random").strip().lower()
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def derive_parallel_seed(base_seed: int, index: int, purpose: str) -> int:
    """Derive a per-component seed from base seed, index, and purpose using sha256.

    Returns a 63-bit positive integer suitable for seeding common RNGs.
    """
    s = f"{base_seed}|{index}|{purpose}".encode("utf-8")
    digest = hashlib.sha256(s).digest()
    # take first 8 bytes, mask to 63 bits to ensure non-negative
    val = int.from_bytes(digest[:8], byteorder="big") & ((1 << 63) - 1)
    return val


_default_rng: RandomSource = PyRandomSource()


def random_int(min_value: float, max_value: float, rng: Optional[RandomSource] = None) -> int:
    """Uniform integer in [ceil(min_value), floor(max_value)]."""
    lo = math.ceil(min_value)
    hi = math.floor(max_value)
    if lo > hi:
        raise OutOfRange(f"Empty integer range [{min_value}, {max_value}]")
    return (rng or _default_rng).randint(lo, hi)


def _fisher_yates(items: List[T], rng: Optional[RandomSource]) -> None:
    for i in range(len(items) - 1, 0, -1):
        j = random_int(0, i, rng)
        items[i], items[j] = items[j], items[i]


def unique_random_in_range(
    min_value: int, max_value: int, count: int, rng: Optional[RandomSource] = None
) -> List[int]:
    """Return `count` distinct integers drawn uniformly from [min_value, max_value].

    The whole range is materialized and shuffled, so cost is linear in the
    range size. Bingo column ranges hold at most 15 values.
    """
    range_size = max_value - min_value + 1
    if count < 0 or count > range_size:
        raise OutOfRange(
            f"Cannot draw {count} unique numbers from [{min_value}, {max_value}] "
            f"(range size: {max(range_size, 0)})"
        )
    if count == 0:
        return []
    available = list(range(min_value, max_value + 1))
    _fisher_yates(available, rng)
    return available[:count]


def shuffle(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Return a shuffled copy of `items`; the input is left untouched."""
    result = list(items)
    _fisher_yates(result, rng)
    return result
