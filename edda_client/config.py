"""Frozen dataclasses for configuration and YAML loader with env-var interpolation."""

from __future__ import annotations

import os
import re
import types
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _interpolate_env(value: str) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = os.environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any) -> Any:
    """Recursively interpolate env vars in strings throughout a nested structure."""
    if isinstance(obj, str):
        return _interpolate_env(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v) for v in obj]
    return obj


@dataclass(frozen=True)
class EddaConfig:
    url: str = ""  # may contain {region} and {vip} placeholders
    region: str = ""
    vip: str = ""
    timeout: int = 10
    verify_ssl: bool = True
    user_agent: str = "edda-client"

    def base_url(self) -> str:
        """The service root with placeholders substituted and no trailing slash."""
        return self.url.replace("{region}", self.region).replace("{vip}", self.vip).rstrip("/")


@dataclass(frozen=True)
class AWSConfig:
    region: str = ""
    credential_profile: str = ""  # empty = use default boto3 credential chain


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    edda: EddaConfig = field(default_factory=EddaConfig)
    aws: AWSConfig | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _get_dataclass_type(ft: Any) -> type | None:
    """Return the underlying dataclass type from a type annotation (handles Optional/X|None)."""
    if isinstance(ft, type) and hasattr(ft, "__dataclass_fields__"):
        return ft
    if isinstance(ft, types.UnionType):
        args = [a for a in ft.__args__ if a is not type(None)]
        if len(args) == 1 and isinstance(args[0], type) and hasattr(args[0], "__dataclass_fields__"):
            return args[0]
    origin = getattr(ft, "__origin__", None)
    if origin is typing.Union:
        args = [a for a in ft.__args__ if a is not type(None)]
        if len(args) == 1 and isinstance(args[0], type) and hasattr(args[0], "__dataclass_fields__"):
            return args[0]
    return None


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested dataclass fields."""
    if not isinstance(data, dict):
        return data
    field_types = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in field_types:
            continue
        dc_type = _get_dataclass_type(field_types[key])
        if dc_type is not None:
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigError(f"'{key}' must be a mapping")
            kwargs[key] = _build_nested(dc_type, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _walk_and_interpolate(raw)
    config = _build_nested(AppConfig, raw)
    validate(config)
    return config


def validate(config: AppConfig) -> None:
    """Validate configuration values."""
    edda = config.edda
    if not edda.url:
        raise ConfigError("edda.url is required")
    for key in ("url", "region", "vip", "user_agent"):
        if not isinstance(getattr(edda, key), str):
            raise ConfigError(f"edda.{key} must be a string")
    if not edda.url.startswith(("http://", "https://")):
        raise ConfigError("edda.url must start with http:// or https://")
    if "{region}" in edda.url and not edda.region:
        raise ConfigError("edda.url contains {region} but edda.region is not set")
    if "{vip}" in edda.url and not edda.vip:
        raise ConfigError("edda.url contains {vip} but edda.vip is not set")

    if not isinstance(edda.timeout, (int, float)) or isinstance(edda.timeout, bool) or edda.timeout <= 0:
        raise ConfigError("edda.timeout must be a positive number")

    if config.aws is not None:
        if not isinstance(config.aws.region, str) or not config.aws.region:
            raise ConfigError("aws.region is required when the aws section is present")
        if not isinstance(config.aws.credential_profile, str):
            raise ConfigError("aws.credential_profile must be a string")

    if not isinstance(config.logging.level, str) or config.logging.level.upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
