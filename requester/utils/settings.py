"""
requester/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for runtime configuration
of the declarative HTTP requester.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (REQUESTER_*)
- Exposing a cached, fully-validated Settings object to the application
- Applying log_level to structlog once settings are loaded

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) Field defaults declared on Settings
2) YAML defaults from:
       parameters/parameters.yaml
3) Environment variables:
       REQUESTER_*

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- HTTP calls
- Placeholder substitution or template rendering
- Request descriptors (those are caller data, not configuration)

It should only define *configuration structure and loading rules*.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"

DEFAULT_PLACEHOLDER_PATTERN = r"\{(\w[\w.]*)\}"


class Settings(BaseSettings):
    """
    Runtime settings for the requester.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (REQUESTER_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="REQUESTER_",
        extra="ignore",
    )

    # Minimum level emitted by structlog loggers (DEBUG, INFO, WARNING, ERROR)
    log_level: str = "INFO"

    # Used only when the caller does not hand in its own httpx client
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    debug_curl: bool = Field(
        default=False,
        description="If true, Requester captures an equivalent curl command for every outgoing request.",
    )

    # Placeholder substitution defaults
    placeholder_pattern: str = Field(
        default=DEFAULT_PLACEHOLDER_PATTERN,
        description="Regular expression whose first capture group is the lookup key.",
    )
    escape_placeholder_dots: bool = Field(
        default=False,
        description="If true, dots inside a placeholder key are literal, not path separators.",
    )


@lru_cache(maxsize=1)
def _load_yaml_parameters() -> Dict[str, Any]:
    """
    Load base configuration from parameters/parameters.yaml.

    Cached so the file is read once per process.
    """
    if not PARAMETERS_PATH.exists():
        logger.warning("parameters_yaml_missing", expected=str(PARAMETERS_PATH))
        return {}

    try:
        with PARAMETERS_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("parameters_yaml_load_error", path=str(PARAMETERS_PATH), error=str(exc))
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "parameters_yaml_not_dict",
            path=str(PARAMETERS_PATH),
            type=type(data).__name__,
        )
        return {}

    logger.info("parameters_yaml_loaded", path=str(PARAMETERS_PATH))
    return data


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Construct and return the final validated Settings object.

    This function is cached (singleton per process) and is the ONLY
    supported way to access runtime settings.
    """
    # 1) YAML defaults
    yaml_data = _load_yaml_parameters()

    # 2) env overrides (partial)
    try:
        env_data = Settings().model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 3) merge + final validation
    merged: Dict[str, Any] = {**yaml_data, **env_data}
    settings = Settings.model_validate(merged)
    configure_logging(settings)

    logger.info(
        "settings_loaded",
        log_level=settings.log_level,
        http_timeout_seconds=settings.http_timeout_seconds,
        debug_curl=settings.debug_curl,
        placeholder_pattern=settings.placeholder_pattern,
        escape_placeholder_dots=settings.escape_placeholder_dots,
    )

    return settings


def configure_logging(settings: Settings) -> None:
    """Filter structlog output below settings.log_level; unknown names fall back to INFO."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))
