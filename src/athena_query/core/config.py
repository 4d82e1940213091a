"""Configuration management for Athena Query.

Handles the TOML config file, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--region, --workgroup, etc.)
2. Environment variables (AWS_REGION, ATHENA_WORKGROUP, ...)
3. Named profile (--profile or ATHENA_QUERY_PROFILE env var)
4. Config file defaults
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from athena_query.cli.output import OutputFormat
from athena_query.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "athena-query" / "config.toml"

PROFILE_ENV_VAR = "ATHENA_QUERY_PROFILE"

# Checked in order; the first variable that is set wins for its field.
_ENV_VARS: list[tuple[str, str]] = [
    ("AWS_REGION", "region"),
    ("AWS_DEFAULT_REGION", "region"),
    ("AWS_PROFILE", "aws_profile"),
    ("ATHENA_WORKGROUP", "workgroup"),
    ("ATHENA_OUTPUT_LOCATION", "output_location"),
    ("ATHENA_DATABASE", "database"),
    ("ATHENA_CATALOG", "catalog"),
]

_PROFILE_DEFAULTS: dict[str, Any] = {
    "region": None,
    "aws_profile": None,
    "workgroup": "primary",
    "output_location": None,
    "database": None,
    "catalog": None,
    "poll_interval": 0.5,
    "max_polls": None,
    "timeout": None,
    "page_size": None,
}


class AthenaProfile(BaseModel):
    region: str | None = None
    aws_profile: str | None = None
    workgroup: str = "primary"
    output_location: str | None = None
    database: str | None = None
    catalog: str | None = None
    poll_interval: float = 0.5
    max_polls: int | None = None
    timeout: float | None = None
    page_size: int | None = None

    @field_validator("output_location")
    @classmethod
    def validate_output_location(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith("s3://"):
            msg = f"Invalid output_location: '{v}'. Must be an s3:// URI"
            raise ValueError(msg)
        return v

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v < 0:
            msg = f"Invalid poll_interval: {v}. Must be >= 0"
            raise ValueError(msg)
        return v

    @field_validator("max_polls")
    @classmethod
    def validate_max_polls(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            msg = f"Invalid max_polls: {v}. Must be >= 1"
            raise ValueError(msg)
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            msg = f"Invalid timeout: {v}. Must be > 0"
            raise ValueError(msg)
        return v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int | None) -> int | None:
        # GetQueryResults accepts at most 1000 rows per page.
        if v is not None and not (1 <= v <= 1000):
            msg = f"Invalid page_size: {v}. Must be 1-1000"
            raise ValueError(msg)
        return v


class AppConfig(BaseModel):
    default_format: str = "table"
    default_profile: str | None = None
    profiles: dict[str, AthenaProfile] = {}

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        allowed = [fmt.value for fmt in OutputFormat]
        if v not in allowed:
            msg = f"Invalid default_format: '{v}'. Must be one of: {', '.join(allowed)}"
            raise ValueError(msg)
        return v


class ResolvedConfig(AthenaProfile):
    default_format: str = "table"
    active_profile: str | None = None
    sources: dict[str, str] = {}

    def runner_options(self) -> dict[str, Any]:
        """Keyword arguments for QueryRunner taken from this config."""
        return {
            "poll_interval": self.poll_interval,
            "max_polls": self.max_polls,
            "timeout": self.timeout,
        }


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > config defaults > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {}

    # Layer 1: Built-in defaults
    resolved.update(_PROFILE_DEFAULTS)
    resolved["default_format"] = "table"
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Config file global defaults
    if config.default_format != "table":
        resolved["default_format"] = config.default_format
        sources["default_format"] = "config"

    # Layer 3: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get(PROFILE_ENV_VAR)
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            resolved[key] = getattr(profile, key)
            sources[key] = f"profile: {effective_profile}"

    # Layer 4: Environment variables
    env_applied: set[str] = set()
    for env_var, field_name in _ENV_VARS:
        value = os.environ.get(env_var)
        if value and field_name not in env_applied:
            resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"
            env_applied.add(field_name)

    # Layer 5: CLI flags (highest priority)
    for field_name in _PROFILE_DEFAULTS:
        value = cli_overrides.get(field_name)
        if value is not None:
            resolved[field_name] = value
            sources[field_name] = f"cli: --{field_name.replace('_', '-')}"

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    try:
        return ResolvedConfig(**resolved)
    except ValueError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigError(msg) from e
