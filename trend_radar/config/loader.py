"""Configuration loading helpers: optional file first, environment on top."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import RadarConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_PATH_ENV = "TREND_RADAR_CONFIG"

# environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "GOOGLE_TRENDS_RSS": ("feed", "url"),
    "TIKTOK_CC_HASHTAGS": ("scrape", "primary_url"),
    "APIFY_TOKEN": ("apify", "token"),
    "APIFY_ACTOR_ID": ("apify", "actor_id"),
    "TIKTOK_COUNTRY": ("apify", "country_code"),
    "TIKTOK_PERIOD": ("apify", "period"),
    "TIKTOK_MAX_ITEMS": ("apify", "max_items"),
    "TIKTOK_INDUSTRY": ("apify", "industry"),
}


def _read_file(path: Path) -> dict:
    if path.suffix not in CONFIG_EXTENSIONS:
        raise ConfigError(f"Unsupported configuration format: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def apply_env_overrides(payload: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in payload.items()}
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        bucket = merged.setdefault(section, {})
        bucket[field] = value
    return merged


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> RadarConfig:
    """Build a :class:`RadarConfig` from an optional file plus environment overrides."""

    env = os.environ if environ is None else environ
    if path is None and env.get(CONFIG_PATH_ENV):
        path = env[CONFIG_PATH_ENV]
    payload: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        payload = _read_file(config_path)
    payload = apply_env_overrides(payload, env)
    try:
        return RadarConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = ["CONFIG_EXTENSIONS", "CONFIG_PATH_ENV", "ENV_OVERRIDES", "apply_env_overrides", "load_config"]
