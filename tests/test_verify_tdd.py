from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from bingo_cards.core import BingoGeneratorService
from bingo_cards.models import GeneratedCell
from bingo_cards.rng import create_rng
from bingo_cards.serialize import emit_cards_json, load_cards_json
from bingo_cards.strategies import default_strategies
from bingo_cards.verify import verify


@pytest.fixture
def service():
    return BingoGeneratorService(strategies=default_strategies(create_rng("py_random", 123)))


@pytest.fixture
def configs(service):
    return {key: s.config for key, s in service.strategies.items()}


def test_verify_reports_clean_batch(service, configs):
    cards = service.generate_batch("3x9", "s", 20) + service.generate_batch("5x5", "s", 20)
    rep = verify(cards, configs)
    assert rep["cards"] == 40
    assert rep["formats"] == {"3x9": 20, "5x5": 20}
    assert rep["ok_constraints"] is True
    assert rep["ok_no_identical_cards"] is True
    assert rep["hash_mismatches"] == 0
    assert sum(rep["frequencies"].values()) == 20 * 15 + 20 * 24


def test_verify_flags_broken_and_duplicate_cards(service, configs):
    card = service.generate_card("5x5", "s")
    cells = list(card.cells)
    # swap two values in the B column so it is no longer ascending
    cells[0], cells[5] = (
        GeneratedCell(index=0, type="number", value=cells[5].value),
        GeneratedCell(index=5, type="number", value=cells[0].value),
    )
    broken = dataclasses.replace(card, id="broken", cells=cells)
    twin = dataclasses.replace(card, id="twin")

    rep = verify([card, twin, broken], configs)
    assert list(rep["violations"]) == ["broken"]
    assert any("ascending" in p for p in rep["violations"]["broken"])
    assert rep["duplicate_hashes"] == 1
    assert rep["hash_mismatches"] == 1
    assert rep["ok_constraints"] is False


def test_verify_unknown_format(service, configs):
    card = dataclasses.replace(service.generate_card("5x5", "s"), format="4x4")
    rep = verify([card], configs)
    assert rep["violations"][card.id] == ["unknown format 4x4"]


def test_cards_json_reload(tmp_path: Path, service, configs):
    cards = service.generate_batch("3x9", "s", 5)
    path = tmp_path / "out" / "cards.json"
    emit_cards_json(path, cards=cards, run_meta={"seed": 123}, mkdirs=True, overwrite=False)
    loaded = load_cards_json(path)
    assert [c.hash for c in loaded] == [c.hash for c in cards]
    assert loaded[0].cells == cards[0].cells
    assert loaded[0].created_at == cards[0].created_at
    assert verify(loaded, configs)["ok_constraints"] is True

    with pytest.raises(FileExistsError):
        emit_cards_json(path, cards=cards, run_meta={}, mkdirs=True, overwrite=False)
