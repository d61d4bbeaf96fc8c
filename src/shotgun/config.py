"""Configuration loading and validation for the shotgun event bus."""

from __future__ import annotations

from copy import deepcopy
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigValidationError

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "shotgun"
CONFIG_PATH = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
RESERVED_PATH_CHARACTERS = ("/", "*")


class BusConfig(BaseModel):
    """Event bus naming and locking behavior."""

    internal_prefix: str = "system:"
    key_prefix: str = "SG-"
    key_suffix_length: int = Field(default=25, ge=0, le=128)
    thread_safe: bool = True
    internal_events: list[str] = Field(default_factory=list)

    @field_validator("internal_prefix", mode="before")
    @classmethod
    def _validate_internal_prefix(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("internal_prefix must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("internal_prefix must not be empty.")
        for character in RESERVED_PATH_CHARACTERS:
            if character in normalized:
                raise ValueError(f"internal_prefix must not contain {character!r}.")
        return normalized

    @field_validator("key_prefix", mode="before")
    @classmethod
    def _validate_key_prefix(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("key_prefix must be a string.")
        if "/" in value:
            raise ValueError("key_prefix must not contain '/'.")
        return value

    @field_validator("internal_events", mode="before")
    @classmethod
    def _validate_internal_events(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("internal_events must be a list of event paths.")
        normalized: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError("internal_events entries must be strings.")
            candidate = item.strip().strip("/")
            if not candidate:
                raise ValueError("internal_events entries must not be empty.")
            if candidate not in normalized:
                normalized.append(candidate)
        return normalized


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/shotgun/bus.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    bus: BusConfig = BusConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        config = Config.model_validate(raw)
        return config.model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    A missing file yields the defaults. The optional ``config_path`` argument
    is intended for tests and tooling.
    """
    target_path = config_path or CONFIG_PATH

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (
            Exception
        ) as exc:  # noqa: BLE001 - we must not crash on invalid user config.
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = (
        _deep_merge(DEFAULT_CONFIG, raw_data)
        if isinstance(raw_data, dict)
        else _safe_default_config()
    )
    return _validate_config(merged)
