"""Settings discovery and validation."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .models import Settings

logger = logging.getLogger(__name__)

_LOCAL_CONFIG = Path("ivanti_hostconfig.yaml")
_USER_CONFIG = Path.home() / ".config" / "ivanti_hostconfig" / "config.yaml"


def load_settings_file(path: Path | str) -> Settings:
    """Load and validate one YAML settings file. An empty file means defaults."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load settings {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings {path} is not a YAML mapping")
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings {path}: {exc}") from exc


def load_settings(path: Path | str | None = None, search: tuple[Path, ...] | None = None) -> Settings:
    """
    Resolve the settings for this invocation.

    An explicit *path* must exist. Otherwise the first existing file wins:
      1. ./ivanti_hostconfig.yaml
      2. ~/.config/ivanti_hostconfig/config.yaml
    and built-in defaults apply when neither exists.
    """
    if path is not None:
        return load_settings_file(path)

    for candidate in search if search is not None else (_LOCAL_CONFIG, _USER_CONFIG):
        if candidate.is_file():
            logger.debug("Using settings from %s", candidate)
            return load_settings_file(candidate)

    logger.debug("No settings file found; using defaults")
    return Settings()
