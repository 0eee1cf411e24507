"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

_DEFAULT_REST_DELAY_SECONDS = 3
_MAX_REST_DELAY_SECONDS = 60
_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    override = os.environ.get("REINFORCE_LAB_HOME")
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "ReinforceLab"
        return Path.home() / "ReinforceLab"
    return Path.home() / ".config" / "reinforce_lab"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def debug_enabled() -> bool:
    """Return True only when REINFORCE_LAB_DEBUG is explicitly set to '1'."""
    return os.getenv("REINFORCE_LAB_DEBUG") == "1"


def _normalize_rest_delay(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _DEFAULT_REST_DELAY_SECONDS
    return max(0, min(_MAX_REST_DELAY_SECONDS, int(value)))


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _defaults() -> Dict[str, Any]:
    return {"rest_delay_seconds": _DEFAULT_REST_DELAY_SECONDS, "log_level": _DEFAULT_LOG_LEVEL}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _defaults()
    except (OSError, ValueError):
        return _defaults()
    if not isinstance(raw, dict):
        return _defaults()
    return {
        "rest_delay_seconds": _normalize_rest_delay(raw.get("rest_delay_seconds")),
        "log_level": _normalize_log_level(raw.get("log_level")),
    }


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "rest_delay_seconds": _normalize_rest_delay(config.get("rest_delay_seconds")),
        "log_level": _normalize_log_level(config.get("log_level")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def configure_logging(config: Dict[str, Any]) -> None:
    """Set up the root logger once for the console session."""
    level_name = "DEBUG" if debug_enabled() else _normalize_log_level(config.get("log_level"))
    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
