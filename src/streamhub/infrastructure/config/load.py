from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {
    "http",
    "logging",
    "aggregator",
    "subtitles",
    "player",
    "api",
}

# Flat keys (ENV/CLI) -> (section, key)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "aggregator_base_url": ("aggregator", "base_url"),
    "aggregator_enabled": ("aggregator", "enabled"),
    "subtitles_base_url": ("subtitles", "base_url"),
    "player_controls_hide_seconds": ("player", "controls_hide_seconds"),
    "player_max_retries": ("player", "max_retries"),
    "player_close_key": ("player", "close_key"),
    "player_controls_key": ("player", "controls_key"),
    "player_probe_timeout_seconds": ("player", "probe_timeout_seconds"),
    "api_host": ("api", "host"),
    "api_port": ("api", "port"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge `override` into `base` and return `base`.

    Rules:
    - dict + dict => deep merge
    - otherwise => override wins
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a layer (defaults/YAML/ENV/CLI) into the canonical *sectioned* shape.

    Sectioned blocks pass through; flat keys such as ``api_port`` or
    ``log_level`` are folded into their section.
    """
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section in data and isinstance(data[section], Mapping):
            out[section] = dict(data[section])

    if "app_name" in data:
        out["app_name"] = data["app_name"]
    if "environment" in data:
        out["environment"] = data["environment"]

    for flat_key, (section, section_key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})
            out[section][section_key] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    raw = config_path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(raw)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    No filesystem side effects: nothing is created or written.
    """
    cli_overrides = cli_overrides or {}

    # Load .env first so it participates as "env vars" layer.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    base = _normalize_layer(deepcopy(DEFAULT_CONFIG))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        _deep_merge(base, _normalize_layer(_read_yaml_config(config_path)))

    _deep_merge(base, _normalize_layer(EnvOverrides().to_update_dict()))
    _deep_merge(base, _normalize_layer(cli_overrides))

    return AppConfig.model_validate(base)
