from __future__ import annotations

import json
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .models import BingoCard, GeneratedCell


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists() and mkdirs:
        parent.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object, *, mkdirs: bool, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(
            f"Refusing to overwrite existing file without --force: {path}"
        )
    ensure_parent(path, mkdirs=mkdirs)
    text = json.dumps(data, ensure_ascii=True, sort_keys=True, indent=2)
    path.write_text(text + "\n", encoding="utf-8")


def card_to_dict(card: BingoCard) -> Dict[str, object]:
    return {
        "id": card.id,
        "format": card.format,
        "session_id": card.session_id,
        "hash": card.hash,
        "created_at": card.created_at.astimezone(timezone.utc).isoformat(),
        "cells": [cell.to_dict() for cell in card.cells],
    }


def card_from_dict(data: Dict[str, object]) -> BingoCard:
    cells = [
        GeneratedCell(
            index=int(c["index"]),
            type=str(c["type"]),
            value=None if c.get("value") is None else int(c["value"]),
        )
        for c in data["cells"]  # type: ignore[union-attr]
    ]
    return BingoCard(
        id=str(data["id"]),
        format=str(data["format"]),
        session_id=str(data["session_id"]),
        cells=cells,
        hash=str(data["hash"]),
        created_at=datetime.fromisoformat(str(data["created_at"])),
    )


def build_run_meta(
    *,
    app_version: str,
    params_hash: str,
    seed: Optional[int],
    rng_engine: str,
    session_id: str,
    card_format: str,
) -> Dict[str, object]:
    return {
        "app_version": app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "python_version": sys.version.split()[0],
        "platform": platform.system().lower(),
        "params_hash": params_hash,
        "seed": seed,
        "rng_engine": rng_engine,
        "session_id": session_id,
        "format": card_format,
    }


def emit_cards_json(
    path: Path,
    *,
    cards: Sequence[BingoCard],
    run_meta: Dict[str, object],
    mkdirs: bool,
    overwrite: bool,
) -> None:
    data = {
        "run_meta": run_meta,
        "cards": [card_to_dict(card) for card in cards],
    }
    write_json(path, data, mkdirs=mkdirs, overwrite=overwrite)


def emit_report_json(
    path: Path, *, report: Dict[str, object], mkdirs: bool, overwrite: bool
) -> None:
    write_json(path, report, mkdirs=mkdirs, overwrite=overwrite)


def load_cards_json(path: Path) -> List[BingoCard]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("cards"), list):
        raise ValueError(f"{path} does not contain a 'cards' list")
    return [card_from_dict(entry) for entry in data["cards"]]
