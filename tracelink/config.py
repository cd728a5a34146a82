"""Configuration loading: TOML file, environment variables and overrides.

Priority, lowest to highest: defaults, config file, environment, explicit
overrides passed to ``load_config``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tracelink import runtime_config
from tracelink.errors import ConfigError
from tracelink.ids import RandomIdGenerator
from tracelink.processors.sampler import DEFAULT_SAMPLE_ONE_IN

CONFIG_FILE_NAME = "tracelink.toml"
HOME_CONFIG_FILE_NAME = ".tracelink.toml"

ENV_SAMPLE_ONE_IN = "TRACELINK_SAMPLE_ONE_IN"
ENV_ID_SEED = "TRACELINK_ID_SEED"
ENV_LOG_LEVEL = "TRACELINK_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class TracingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sample_one_in: int = Field(default=DEFAULT_SAMPLE_ONE_IN, ge=1)
    id_seed: Optional[int] = None


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(_LOG_LEVELS)}")
        return level


class TracelinkConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tracing: TracingConfig = Field(default_factory=TracingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Optional[str]:
    """
    Look for a config file in the current directory, then the home directory.

    Returns:
        Path of the first file found, or None
    """
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / HOME_CONFIG_FILE_NAME,
    ]
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Read a TOML config file into a nested dict.

    A missing file yields an empty dict.

    Raises:
        ConfigError: if the file is not valid TOML
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("invalid TOML in config file", {"path": str(config_path), "error": str(e)}) from e


def _env_overrides() -> Dict[str, Dict[str, Any]]:
    overrides: Dict[str, Dict[str, Any]] = {}
    if os.getenv(ENV_SAMPLE_ONE_IN):
        overrides.setdefault("tracing", {})["sample_one_in"] = os.environ[ENV_SAMPLE_ONE_IN]
    if os.getenv(ENV_ID_SEED):
        overrides.setdefault("tracing", {})["id_seed"] = os.environ[ENV_ID_SEED]
    if os.getenv(ENV_LOG_LEVEL):
        overrides.setdefault("logging", {})["level"] = os.environ[ENV_LOG_LEVEL]
    return overrides


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(data: Dict[str, Any]) -> TracelinkConfig:
    """
    Validate a nested config dict.

    Raises:
        ConfigError: if a section or value is unknown or invalid
    """
    try:
        return TracelinkConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError("invalid tracelink configuration", {"errors": e.error_count(), "detail": str(e)}) from e


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TracelinkConfig:
    """
    Load configuration from file, environment and explicit overrides.

    Args:
        path: Config file path; searched for with ``find_config_file`` if None
        overrides: Nested dict applied last, e.g. ``{"tracing": {"id_seed": 1}}``
    """
    config_path = path or find_config_file()
    data = load_toml_config(config_path) if config_path else {}
    data = _merge(data, _env_overrides())
    if overrides:
        data = _merge(data, overrides)
    return validate_config(data)


def apply_config(config: TracelinkConfig) -> None:
    """Push a loaded configuration into the runtime state and logger."""
    runtime_config.set_sample_one_in(config.tracing.sample_one_in)
    if config.tracing.id_seed is not None:
        runtime_config.set_id_generator(RandomIdGenerator(seed=config.tracing.id_seed))
    level = getattr(logging, config.logging.level)
    logging.getLogger("tracelink").setLevel(level)
    runtime_config.set_debug(level == logging.DEBUG)
