from __future__ import annotations

from collections import Counter
from typing import Dict, List, Mapping, Sequence

from .core.constraints import checker_for_format
from .models import BingoCard, CardFormatConfig
from .uniqueness import generate_card_hash


def compute_frequencies(cards: Sequence[BingoCard]) -> Dict[int, int]:
    counts: Counter[int] = Counter()
    for card in cards:
        counts.update(card.numbers())
    return dict(sorted(counts.items()))


def constraint_violations(
    cards: Sequence[BingoCard], configs: Mapping[str, CardFormatConfig]
) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for card in cards:
        config = configs.get(card.format)
        if config is None:
            out[card.id] = [f"unknown format {card.format}"]
            continue
        problems = checker_for_format(card.format, config).violations(card.cells)
        if problems:
            out[card.id] = problems
    return out


def count_hash_mismatches(cards: Sequence[BingoCard]) -> int:
    return sum(1 for card in cards if generate_card_hash(card.cells) != card.hash)


def count_duplicate_hashes(cards: Sequence[BingoCard]) -> int:
    """Identical cells issued more than once within the same session."""
    seen: Counter = Counter(
        (card.session_id, generate_card_hash(card.cells)) for card in cards
    )
    return sum(c - 1 for c in seen.values() if c > 1)


def verify(
    cards: Sequence[BingoCard], configs: Mapping[str, CardFormatConfig]
) -> Dict[str, object]:
    violations = constraint_violations(cards, configs)
    duplicates = count_duplicate_hashes(cards)
    return {
        "cards": len(cards),
        "formats": dict(Counter(card.format for card in cards)),
        "frequencies": compute_frequencies(cards),
        "violations": violations,
        "duplicate_hashes": duplicates,
        "hash_mismatches": count_hash_mismatches(cards),
        "ok_constraints": not violations,
        "ok_no_identical_cards": duplicates == 0,
    }
