from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

from .uniqueness import DEFAULT_CLEANUP_INTERVAL_MS, DEFAULT_SESSION_TTL_MS


ENV_PREFIX = "BINGO_CARDS_"

INT_KEYS = {
    "count",
    "seed.value",
    "session_ttl_ms",
    "cleanup_interval_ms",
    "max_attempts",
}


def _read_config_file(config_path: Path | None) -> Dict[str, Any]:
    if not config_path:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML config must be a mapping")
        return data
    if suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON config must be a mapping")
        return data
    raise ValueError(f"Unsupported config extension: {suffix}")


def _collect_env_vars(env: Mapping[str, str]) -> Dict[str, Any]:
    """Map ENV variables with BINGO_CARDS_ prefix to config keys.

    We use an explicit map to avoid ambiguity. Keys not present are ignored.
    """
    mapping: Dict[str, str] = {
        f"{ENV_PREFIX}FORMAT": "format",
        f"{ENV_PREFIX}COUNT": "count",
        f"{ENV_PREFIX}SESSION_ID": "session_id",
        # Seed
        f"{ENV_PREFIX}SEED_VALUE": "seed.value",
        f"{ENV_PREFIX}SEED_ENGINE": "seed.engine",
        # Registry
        f"{ENV_PREFIX}SESSION_TTL_MS": "session_ttl_ms",
        f"{ENV_PREFIX}CLEANUP_INTERVAL_MS": "cleanup_interval_ms",
        f"{ENV_PREFIX}MAX_ATTEMPTS": "max_attempts",
        # Output & logging
        f"{ENV_PREFIX}LOG_LEVEL": "log_level",
        f"{ENV_PREFIX}LOG_FILE": "log_file",
        f"{ENV_PREFIX}OUT_CARDS": "out_cards",
        f"{ENV_PREFIX}OUT_REPORT": "out_report",
    }

    result: Dict[str, Any] = {}
    for env_key, cfg_key in mapping.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if cfg_key in INT_KEYS:
            try:
                result[cfg_key] = int(raw)
            except ValueError:
                result[cfg_key] = raw
        else:
            result[cfg_key] = raw

    return result


def _set_nested(config: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cursor = config
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy via JSON
    for key, value in overrides.items():
        if "." in key:
            _set_nested(merged, key, value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def canonical_json_dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, sort_keys=True, separators=(",", ":"))


def compute_params_hash(resolved: Mapping[str, Any]) -> str:
    include = {
        "format",
        "count",
        "max_attempts",
        "seed.engine",
        "seed.value",
    }

    def extract(path: str, source: Mapping[str, Any]) -> Any:
        cur: Any = source
        for part in path.split("."):
            if not isinstance(cur, Mapping) or part not in cur:
                return None
            cur = cur[part]
        return cur

    contract: Dict[str, Any] = {}
    for item in include:
        value = extract(item, resolved)
        if value is not None:
            contract[item] = value

    digest = hashlib.sha256(canonical_json_dumps(contract).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


def resolve_paths(
    resolved: Dict[str, Any],
    config_file: Path | None,
    cli_overrides: Dict[str, Any],
) -> Dict[str, Any]:
    """Normalize paths per policy.

    - Paths from config file: resolve relative to config directory
    - Paths from CLI: resolve relative to CWD
    """
    cwd = Path.cwd()
    cfg_dir = config_file.parent if config_file else None

    def normalize(path_value: str | None, is_cli: bool) -> str | None:
        if path_value is None or path_value == "":
            return None
        p = Path(path_value)
        if p.is_absolute():
            return str(p)
        base = cwd if is_cli else (cfg_dir or cwd)
        return str((base / p).resolve())

    result = dict(resolved)
    path_keys = ("out_cards", "out_report", "log_file")
    cli_keys = {k for k in cli_overrides if k in path_keys}

    for key in path_keys:
        value = resolved.get(key)
        if value is None:
            continue
        result[key] = normalize(str(value), key in cli_keys)

    return result


def resolve_parameters(
    *,
    config_path_str: str | None,
    cli_overrides: Dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> Tuple[Dict[str, Any], str, Path | None]:
    """Resolve parameters with precedence CLI > ENV > config > defaults.

    Returns (resolved_params, params_hash, config_path)
    """
    config_path = Path(config_path_str).resolve() if config_path_str else None
    file_cfg = _read_config_file(config_path) if config_path else {}
    env_map = _collect_env_vars(os.environ if env is None else env)

    defaults: Dict[str, Any] = {
        "format": "5x5",
        "count": 1,
        "seed": {"engine": "py_random", "value": None},
        "session_ttl_ms": DEFAULT_SESSION_TTL_MS,
        "cleanup_interval_ms": DEFAULT_CLEANUP_INTERVAL_MS,
        "max_attempts": 100,
        "log_level": "INFO",
    }

    # Merge: config > defaults, then ENV, then CLI
    merged = _apply_overrides(defaults, file_cfg)
    merged = _apply_overrides(merged, env_map)
    merged = _apply_overrides(merged, cli_overrides)

    merged = resolve_paths(merged, config_path, cli_overrides)

    params_hash = compute_params_hash(merged)
    return merged, params_hash, config_path
