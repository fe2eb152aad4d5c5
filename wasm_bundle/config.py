"""Project configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .schemas.config import ProjectConfig
from .utils import resolve_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "wasm-bundle.yaml"


def load_project_config(workspace: Path, config_path: Optional[str | Path] = None) -> ProjectConfig:
    """Load the project configuration.

    An explicit ``config_path`` must exist. Without one, ``wasm-bundle.yaml`` in
    the workspace is used when present and the built-in defaults otherwise.
    """

    if config_path is not None:
        path = resolve_path(config_path, workspace)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = workspace / DEFAULT_CONFIG_NAME
        if not path.is_file():
            logger.debug("No %s in %s; using defaults", DEFAULT_CONFIG_NAME, workspace)
            return ProjectConfig()

    logger.debug("Loading project config from %s", path)
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    return parse_project_config(payload, source=str(path))


def parse_project_config(payload: Any, *, source: str = "<config>") -> ProjectConfig:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config {source} must be a mapping, got {type(payload).__name__}.")
    try:
        return ProjectConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {source}: {exc}") from exc


__all__ = ["DEFAULT_CONFIG_NAME", "load_project_config", "parse_project_config"]
