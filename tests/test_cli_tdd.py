from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from bingo_cards.cli import app
from bingo_cards.version import __version__

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_generate_then_verify(tmp_path: Path):
    cards_path = tmp_path / "cards.json"
    report_path = tmp_path / "report.json"
    result = runner.invoke(
        app,
        [
            "generate",
            "--format", "3x9",
            "--count", "12",
            "--session-id", "hall-7",
            "--seed", "42",
            "--out-cards", str(cards_path),
            "--out-report", str(report_path),
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(cards_path.read_text(encoding="utf-8"))
    assert data["run_meta"]["session_id"] == "hall-7"
    assert len(data["cards"]) == 12
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["ok_constraints"] is True

    result = runner.invoke(app, ["verify", "--cards", str(cards_path)])
    assert result.exit_code == 0, result.output
    assert "12 cards checked" in result.output


def test_generate_rejects_bad_count(tmp_path: Path):
    result = runner.invoke(
        app,
        ["generate", "--count", "101", "--out-cards", str(tmp_path / "c.json"),
         "--out-report", str(tmp_path / "r.json")],
    )
    assert result.exit_code == 2
    assert not (tmp_path / "c.json").exists()


def test_generate_refuses_overwrite(tmp_path: Path):
    cards_path = tmp_path / "cards.json"
    cards_path.write_text("{}", encoding="utf-8")
    result = runner.invoke(
        app,
        ["generate", "--out-cards", str(cards_path), "--out-report", str(tmp_path / "r.json")],
    )
    assert result.exit_code == 2
    assert cards_path.read_text(encoding="utf-8") == "{}"


def test_verify_detects_tampering(tmp_path: Path):
    cards_path = tmp_path / "cards.json"
    runner.invoke(
        app,
        ["generate", "--count", "2", "--seed", "1", "--out-cards", str(cards_path),
         "--out-report", str(tmp_path / "r.json")],
    )
    data = json.loads(cards_path.read_text(encoding="utf-8"))
    data["cards"][1]["cells"] = data["cards"][0]["cells"]
    cards_path.write_text(json.dumps(data), encoding="utf-8")

    result = runner.invoke(app, ["verify", "--cards", str(cards_path)])
    assert result.exit_code == 1
    assert "1 duplicates" in result.output


def test_dry_run(tmp_path: Path):
    result = runner.invoke(app, ["generate", "--format", "3x9", "--dry-run"])
    assert result.exit_code == 0
    assert "Params hash: sha256:" in result.output


def test_verify_rejects_malformed_cell(tmp_path: Path):
    cards_path = tmp_path / "cards.json"
    card = {
        "id": "x",
        "format": "5x5",
        "session_id": "s",
        "hash": "F",
        "created_at": "2026-01-01T00:00:00+00:00",
        "cells": [{"index": 0, "type": "free", "value": 3}],
    }
    cards_path.write_text(json.dumps({"cards": [card]}), encoding="utf-8")

    result = runner.invoke(app, ["verify", "--cards", str(cards_path)])
    assert result.exit_code == 2
    assert "Traceback" not in result.output
    assert "value must be set iff type is 'number'" in result.output


def test_verify_rejects_missing_keys(tmp_path: Path):
    cards_path = tmp_path / "cards.json"
    cards_path.write_text(json.dumps({"cards": [{"id": "x"}]}), encoding="utf-8")

    result = runner.invoke(app, ["verify", "--cards", str(cards_path)])
    assert result.exit_code == 2
    assert "cannot read" in result.output


def test_verify_rejects_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["verify", "--cards", str(tmp_path / "absent.json")])
    assert result.exit_code == 2


def test_same_seed_reproduces_cards(tmp_path: Path):
    hashes = []
    for run in ("a", "b"):
        cards_path = tmp_path / f"{run}.json"
        result = runner.invoke(
            app,
            ["generate", "--format", "3x9", "--count", "5", "--seed", "2024",
             "--out-cards", str(cards_path), "--out-report", str(tmp_path / f"{run}-r.json")],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(cards_path.read_text(encoding="utf-8"))
        hashes.append([c["hash"] for c in data["cards"]])
    assert hashes[0] == hashes[1]
