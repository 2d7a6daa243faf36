"""
Run configuration.

Values are layered: model defaults, then the YAML file named by
``FRAMECOUNT_CONFIG``, then ``FRAMECOUNT_LOG_LEVEL``.  The input path always
comes from the command line.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigError

LOG = logging.getLogger(__name__)

ENV_CONFIG_VAR = "FRAMECOUNT_CONFIG"
ENV_LOG_LEVEL_VAR = "FRAMECOUNT_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RunConfig(BaseModel):
    path: str
    pipeline_name: str = "framecount"
    log_level: str = "INFO"
    log_format: Optional[str] = None
    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("path")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("input path must not be empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_level(cls, value: Any) -> str:
        level = str(value).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{config_path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{config_path}' must contain a mapping.")
    return data


def load_config(path: str, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    config_file = env.get(ENV_CONFIG_VAR)
    if config_file:
        values.update(_read_config_file(Path(config_file).expanduser()))
        LOG.debug("Loaded configuration from %s", config_file)

    log_level = env.get(ENV_LOG_LEVEL_VAR)
    if log_level:
        values["log_level"] = log_level

    values["path"] = path
    try:
        return RunConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
