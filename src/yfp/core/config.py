"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from yfp.core.exceptions import ConfigError
from yfp.core.models import FileFormat

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:134.0) Gecko/20100101 Firefox/134.0"
)


class HttpConfig(BaseModel):
    """Quote history endpoint access configuration."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://finance.yahoo.com"
    user_agent: str = _DEFAULT_USER_AGENT
    request_timeout: float = 30.0
    rate_limit: int = 2
    max_retries: int = 3
    retry_backoff: float = 1.0

    @field_validator("base_url")
    @classmethod
    def base_url_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    @field_validator("rate_limit")
    @classmethod
    def rate_limit_in_range(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("rate_limit must be between 1 and 10")
        return v

    @field_validator("max_retries")
    @classmethod
    def max_retries_in_range(cls, v: int) -> int:
        if v < 0 or v > 5:
            raise ValueError("max_retries must be between 0 and 5")
        return v

    @field_validator("retry_backoff")
    @classmethod
    def backoff_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("retry_backoff must be >= 0")
        return v


class OutputConfig(BaseModel):
    """Where and how exported files are written."""

    model_config = ConfigDict(frozen=True)

    directory: str = "."
    prefix: str = "yfp"
    file_format: FileFormat = FileFormat.CSV

    @field_validator("prefix")
    @classmethod
    def prefix_is_plain_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError("prefix must be a non-empty name without path separators")
        return v


class YfpConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(frozen=True)

    http: HttpConfig = HttpConfig()
    output: OutputConfig = OutputConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "YFP_",
) -> YfpConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (YFP_HTTP__REQUEST_TIMEOUT, etc.)
    2. YAML file at config_path, $YFP_CONFIG or ./yfp.yml
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        YFP_OUTPUT__PREFIX=prices  ->  output.prefix = "prices"
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return YfpConfig.model_validate(merged)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Pick the YAML file to read, if any."""
    candidates = [
        (explicit, "config_path"),
        (os.environ.get("YFP_CONFIG"), "YFP_CONFIG"),
    ]
    for raw, field in candidates:
        if not raw:
            continue
        p = Path(raw)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {raw}",
                context={"field": field, "value": raw},
            )
        return p

    default = Path("yfp.yml")
    return default if default.exists() else None


def _load_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"YAML config must be a mapping, got {type(data).__name__}",
            context={"field": "config_file", "value": str(path)},
        )
    return data


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay prefixed environment variables onto a copy of base.

    YFP_HTTP__MAX_RETRIES=1 becomes {"http": {"max_retries": 1}}.
    """
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in base.items()}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = [part.lower() for part in key[len(prefix) :].split("__")]
        if path == ["config"]:
            continue

        node = result
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = _auto_cast(value)

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Best-effort conversion of an environment string."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value
