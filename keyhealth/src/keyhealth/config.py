"""Configuration loading utilities for keyhealth.

Only ambient concerns are configurable here. The rotation policy thresholds
live in :mod:`keyhealth.status.policy` and are fixed.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import local_config_path, user_config_file

_CONFIG_ENV = "KEYHEALTH_CONFIG"
_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")
    json_output: bool = Field(default=True, description="Emit JSON lines instead of console output")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        if value.strip().upper() not in _LEVELS:
            raise ValueError(f"Unknown logging level: {value}")
        return value.strip()

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> List[Path]:
    """Return candidate config files, most specific first.

    The order is the ``explicit`` argument, the file named by
    ``$KEYHEALTH_CONFIG``, ``./.keyhealth/config.yaml`` and finally the
    per-user file.
    """

    env_value = os.getenv(_CONFIG_ENV)
    candidates = [
        explicit,
        Path(env_value).expanduser() if env_value else None,
        local_config_path(),
        user_config_file(),
    ]
    return [candidate for candidate in candidates if candidate is not None]


def _read_config(path: Path) -> AppConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Configuration in {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a mapping")
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> AppConfig:
    found = next((candidate for candidate in config_search_paths(path) if candidate.is_file()), None)
    if found is None:
        return DEFAULT_CONFIG.model_copy(deep=True)
    return _read_config(found)


def dump_default_config(target: Optional[Path] = None) -> Path:
    """Write the defaults as YAML, to the per-user file unless ``target`` is given."""
    destination = target or user_config_file()
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), sort_keys=False),
        encoding="utf-8",
    )
    return destination


__all__ = [
    "AppConfig",
    "LoggingConfig",
    "DEFAULT_CONFIG",
    "config_search_paths",
    "load_config",
    "dump_default_config",
]
