# regmirror/config/loader.py
"""
Configuration loader for regmirror.

Responsibilities:
- Load the packaged default config
- Merge an optional user config over it (per section)
- Expand ${ENV_VAR} placeholders
- Validate via schema
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from regmirror.config.schema import MirrorConfig
from regmirror.exceptions import ConfigError, ConfigNotFoundError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import CLI

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    return _expand_env(data)


def _merge_sections(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_config_dict(user_config_path: str | Path | None = None) -> dict:
    """Load defaults and overlay the user config, without validation."""
    logger.debug(f"{CLI} Loading default config from {DEFAULT_CONFIG_PATH}")
    data = _load_yaml(DEFAULT_CONFIG_PATH)

    if user_config_path:
        logger.debug(f"{CLI} Loading user config from {user_config_path}")
        data = _merge_sections(data, _load_yaml(Path(user_config_path)))

    return data


def load_config(user_config_path: str | Path | None = None) -> MirrorConfig:
    """
    Load and validate regmirror configuration.

    Precedence:
    - defaults
    - user config (overrides defaults section by section)
    """
    data = load_config_dict(user_config_path)
    try:
        return MirrorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
