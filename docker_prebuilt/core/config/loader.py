"""
Configuration loader — reads install.yml into domain models.

This is the single entry point for install configuration. It reads
YAML, validates it against the Pydantic schemas and returns a typed,
immutable ``InstallConfig``.

Resolution order for the config file:
    explicit path  >  DOCKER_PREBUILT_CONFIG env var  >  bundled install.yml

``DOCKER_PREBUILT_VERSION`` overrides the requested Docker version.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from docker_prebuilt.core.errors import ConfigError
from docker_prebuilt.core.models.target import InstallConfig
from docker_prebuilt.data import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

CONFIG_ENV = "DOCKER_PREBUILT_CONFIG"
VERSION_ENV = "DOCKER_PREBUILT_VERSION"


def find_config_file(path: Path | None = None) -> Path:
    """Pick the config file to load (see module docstring for order)."""
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG


def load_config(path: Path | None = None) -> InstallConfig:
    """Load and validate the install configuration.

    Args:
        path: Explicit path to a YAML config. If None, see
            ``find_config_file``.

    Returns:
        Validated InstallConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = find_config_file(path)

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading install config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    version = os.environ.get(VERSION_ENV)
    if version:
        target = dict(data.get("target") or {})
        target["version"] = version
        data["target"] = target

    try:
        config = InstallConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid install configuration: {e}") from e

    logger.info(
        "Loaded config for %s %s with %d requirements",
        config.target.name, config.target.version, len(config.requirements),
    )
    return config
