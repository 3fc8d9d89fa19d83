from __future__ import annotations

import threading
import time
from typing import List

import pytest

from bingo_cards.core import BingoGeneratorService
from bingo_cards.errors import ExhaustedUniqueSpace, InvalidCount, UnsupportedFormat
from bingo_cards.models import GenerateCardsRequest, GeneratedCell
from bingo_cards.rng import create_rng
from bingo_cards.strategies import CardStrategy, Strategy5x5, default_strategies
from bingo_cards.uniqueness import CardRegistry, generate_card_hash


class FixedStrategy(CardStrategy):
    """Always yields the same grid, so every call after the first collides."""

    format = "fixed"
    config = Strategy5x5.config

    def __init__(self):
        super().__init__()
        self.calls = 0

    def generate_cells(self) -> List[GeneratedCell]:
        self.calls += 1
        return [self.number_cell(0, 1), self.blank_cell(1)]


@pytest.fixture
def service():
    return BingoGeneratorService(strategies=default_strategies(create_rng("py_random", 2024)))


@pytest.mark.parametrize("card_format,total", [("5x5", 25), ("3x9", 27)])
def test_generate_card_builds_record(service, card_format, total):
    card = service.generate_card(card_format, "room-1")
    assert card.format == card_format
    assert card.session_id == "room-1"
    assert len(card.cells) == total
    assert card.hash == generate_card_hash(card.cells)
    assert card.id
    assert card.created_at.tzinfo is not None


def test_generated_card_is_already_registered(service):
    card = service.generate_card("5x5", "s")
    assert service.validate_uniqueness(card, "s") is False
    assert service.validate_uniqueness(card, "another") is True
    assert service.get_session_card_count("s") == 1


def test_clear_session_makes_card_novel_again(service):
    card = service.generate_card("3x9", "s")
    service.clear_session("s")
    assert service.validate_uniqueness(card, "s") is True
    assert service.get_session_card_count("s") == 0


def test_unsupported_format(service):
    with pytest.raises(UnsupportedFormat):
        service.generate_card("4x4", "s")
    with pytest.raises(UnsupportedFormat):
        service.generate_batch("4x4", "s", 3)


@pytest.mark.parametrize("count", [0, 101, -1, -100])
def test_batch_rejects_bad_counts(service, count):
    with pytest.raises(InvalidCount):
        service.generate_batch("5x5", "s", count)
    assert service.registry.get_active_session_count() == 0


def test_batch_of_100_is_unique_and_fast(service):
    start = time.monotonic()
    cards = service.generate_batch("5x5", "s", 100)
    elapsed = time.monotonic() - start
    assert len(cards) == 100
    assert len({c.hash for c in cards}) == 100
    assert len({c.id for c in cards}) == 100
    assert elapsed < 5.0


def test_batch_3x9_unique(service):
    cards = service.generate_batch("3x9", "s", 100)
    assert len({c.hash for c in cards}) == 100
    assert service.get_session_card_count("s") == 100


def test_request_response_wrapper(service):
    response = service.generate(GenerateCardsRequest(count=3, format="3x9"), "game")
    assert response.session_id == "game"
    assert response.generated_count == 3
    assert all(c.format == "3x9" for c in response.cards)


def test_retry_bound_raises_exhausted_without_side_effects():
    strategy = FixedStrategy()
    registry = CardRegistry()
    service = BingoGeneratorService(
        registry=registry, strategies={"fixed": strategy}, max_attempts=5
    )
    first = service.generate_card("fixed", "s")
    assert first.hash == "1-B"

    with pytest.raises(ExhaustedUniqueSpace) as exc_info:
        service.generate_card("fixed", "s")
    assert exc_info.value.attempts == 5
    assert strategy.calls == 6
    assert registry.get_session_count("s") == 1


def test_duplicates_are_retried_until_novel():
    class TwoCardStrategy(FixedStrategy):
        def generate_cells(self):
            self.calls += 1
            value = 1 if self.calls < 3 else 2
            return [self.number_cell(0, value)]

    strategy = TwoCardStrategy()
    service = BingoGeneratorService(strategies={"fixed": strategy})
    assert service.generate_card("fixed", "s").hash == "1"
    assert service.generate_card("fixed", "s").hash == "2"
    assert strategy.calls == 3


def test_sessions_are_independent(service):
    registry = service.registry
    card = service.generate_card("5x5", "a")
    assert registry.register("b", card.hash) is True


def test_services_do_not_share_registries():
    a = BingoGeneratorService()
    b = BingoGeneratorService()
    a.generate_card("5x5", "s")
    assert b.get_session_card_count("s") == 0
    assert a.supported_formats == ["3x9", "5x5"]


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        BingoGeneratorService(max_attempts=0)


def test_concurrent_generation_never_repeats_in_session():
    service = BingoGeneratorService()
    hashes: List[str] = []
    lock = threading.Lock()

    def worker():
        # strategies per thread, one registry for all
        local = BingoGeneratorService(registry=service.registry)
        for _ in range(50):
            card = local.generate_card("5x5", "shared")
            with lock:
                hashes.append(card.hash)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(hashes) == 400
    assert len(set(hashes)) == 400
    assert service.get_session_card_count("shared") == 400


def test_concurrent_register_of_same_hash_accepts_once():
    registry = CardRegistry()
    results: List[bool] = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        accepted = registry.register("s", "same")
        with lock:
            results.append(accepted)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == 7
