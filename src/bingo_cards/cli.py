from __future__ import annotations

import logging
import sys
import time
import uuid
from pathlib import Path

import typer

from .config import resolve_parameters
from .core import BingoGeneratorService
from .errors import BingoCardsError
from .logging_setup import setup_logging
from .serialize import build_run_meta, emit_cards_json, emit_report_json, load_cards_json
from .strategies import default_strategies, seeded_strategies
from .uniqueness import CardRegistry
from .verify import verify as verify_cards
from .version import __version__

app = typer.Typer(help="Session-unique bingo card generator CLI")

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def common_options(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show application version and exit",
        is_eager=True,
        callback=_version_callback,
    ),
) -> None:
    pass


@app.command()
def generate(
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    card_format: str = typer.Option(None, "--format", help="Card format: 5x5 or 3x9"),
    count: int = typer.Option(None, "--count", help="Number of cards (1-100)"),
    session_id: str = typer.Option(None, "--session-id", help="Session scope for uniqueness"),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible output"),
    out_cards: str = typer.Option(None, "--out-cards", help="cards.json output path"),
    out_report: str = typer.Option(None, "--out-report", help="report.json output path"),
    log_file: str = typer.Option(None, "--log-file", help="Log file path"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve params and exit"),
    force: bool = typer.Option(False, "--force", help="Overwrite outputs if they exist"),
    no_mkdirs: bool = typer.Option(False, "--no-mkdirs", help="Do not create parent directories"),
) -> None:
    """Generate a batch of cards that are unique within one session."""

    cli_overrides = {
        key: value
        for key, value in {
            "format": card_format,
            "count": count,
            "session_id": session_id,
            "seed.value": seed,
            "out_cards": out_cards,
            "out_report": out_report,
            "log_file": log_file,
            "log_level": log_level,
        }.items()
        if value is not None
    }

    resolved, params_hash, _cfg_path_unused = resolve_parameters(
        config_path_str=config, cli_overrides=cli_overrides
    )

    setup_logging(
        level=str(resolved.get("log_level", "INFO")),
        log_file=resolved.get("log_file"),
    )

    if dry_run:
        typer.echo(f"Format: {resolved['format']}")
        typer.echo(f"Params hash: {params_hash}")
        raise typer.Exit(0)

    fmt = str(resolved["format"])
    sid = str(resolved.get("session_id") or uuid.uuid4())
    seed_cfg = resolved.get("seed") or {}
    rng_engine = str(seed_cfg.get("engine") or "py_random")
    seed_value = seed_cfg.get("value")
    seed_value = None if seed_value is None else int(seed_value)

    registry = CardRegistry(
        session_ttl_ms=int(resolved["session_ttl_ms"]),
        cleanup_interval_ms=int(resolved["cleanup_interval_ms"]),
    )
    service = BingoGeneratorService(
        registry=registry,
        strategies=seeded_strategies(rng_engine, seed_value),
        max_attempts=int(resolved["max_attempts"]),
    )

    start_time = time.time()
    try:
        cards = service.generate_batch(fmt, sid, int(resolved["count"]))
    except BingoCardsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    elapsed = time.time() - start_time
    logger.info("generated %d %s cards for session %s in %.2fs", len(cards), fmt, sid, elapsed)

    configs = {key: strategy.config for key, strategy in service.strategies.items()}
    report = verify_cards(cards, configs)

    run_meta = build_run_meta(
        app_version=__version__,
        params_hash=params_hash,
        seed=seed_value,
        rng_engine=rng_engine,
        session_id=sid,
        card_format=fmt,
    )

    out_cards_path = Path(resolved.get("out_cards") or "cards.json")
    out_report_path = Path(resolved.get("out_report") or "report.json")

    try:
        emit_cards_json(
            out_cards_path, cards=cards, run_meta=run_meta, mkdirs=(not no_mkdirs), overwrite=force
        )
        emit_report_json(out_report_path, report=report, mkdirs=(not no_mkdirs), overwrite=force)
    except FileExistsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"Generated {len(cards)} {fmt} cards for session {sid} in {elapsed:.2f}s")
    typer.echo(f"Output files: {out_cards_path}, {out_report_path}")
    raise typer.Exit(code=0)


@app.command()
def verify(
    cards: str = typer.Option(..., "--cards", help="Path to cards.json"),
) -> None:
    """Check every card in a cards.json against its format rules."""
    try:
        loaded = load_cards_json(Path(cards))
    except (OSError, KeyError, TypeError, ValueError) as exc:
        typer.echo(f"Error: cannot read {cards}: {exc!r}", err=True)
        raise typer.Exit(code=2)
    configs = {key: strategy.config for key, strategy in default_strategies().items()}
    report = verify_cards(loaded, configs)

    for card_id, problems in report["violations"].items():  # type: ignore[union-attr]
        for problem in problems:
            typer.echo(f"{card_id}: {problem}")

    ok = bool(report["ok_constraints"]) and bool(report["ok_no_identical_cards"])
    ok = ok and report["hash_mismatches"] == 0
    typer.echo(
        f"{report['cards']} cards checked, {len(report['violations'])} invalid, "  # type: ignore[arg-type]
        f"{report['duplicate_hashes']} duplicates, {report['hash_mismatches']} hash mismatches"
    )
    raise typer.Exit(code=0 if ok else 1)


def main(_argv: list[str] | None = None) -> int:
    try:
        app(standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
