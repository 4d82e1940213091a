"""Shared CLI plumbing for command modules.

Config resolution, service creation, and output helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from athena_query.cli.output import get_formatter, write_output
from athena_query.core.athena import AthenaService
from athena_query.core.config import load_config, resolve_config

if TYPE_CHECKING:
    from pathlib import Path

    import typer

    from athena_query.core.config import ResolvedConfig
    from athena_query.core.models import QueryResult
    from athena_query.core.service import QueryService

# Global options that map one-to-one onto config fields.
CONNECTION_OPTIONS = (
    "region",
    "aws_profile",
    "workgroup",
    "output_location",
    "database",
    "catalog",
)


def get_resolved_config(ctx: typer.Context, **overrides: Any) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config_path: Path | None = obj.get("config_file")
    config = load_config(config_path)

    cli_overrides: dict[str, Any] = {}
    for key in CONNECTION_OPTIONS:
        val = obj.get(key)
        if val is not None:
            cli_overrides[key] = val
    for key, val in overrides.items():
        if val is not None:
            cli_overrides[key] = val

    return resolve_config(config, profile_name=obj.get("profile"), **cli_overrides)


def get_service(resolved: ResolvedConfig) -> QueryService:
    return AthenaService.from_config(resolved)


def format_options(ctx: typer.Context, resolved: ResolvedConfig) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    configured = resolved.sources.get("default_format", "default") != "default"
    return {
        "format_flag": obj.get("format"),
        "default": resolved.default_format if configured else None,
        "compact": obj.get("compact", False),
        "width": obj.get("width", 40),
        "no_header": obj.get("no_header", False),
    }


def output_result(
    ctx: typer.Context, result: QueryResult, resolved: ResolvedConfig
) -> None:
    formatter = get_formatter(**format_options(ctx, resolved))
    write_output(formatter, result)
