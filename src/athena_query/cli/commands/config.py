"""Configuration management CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from athena_query.cli.commands._shared import get_resolved_config
from athena_query.core.config import DEFAULT_CONFIG_PATH, load_config

if TYPE_CHECKING:
    from pathlib import Path

config_app = typer.Typer(help="Configuration management commands")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _display(value: object) -> str:
    if value is None:
        return "not set"
    return str(value)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display resolved configuration with source attribution."""
    resolved = get_resolved_config(ctx)
    config_path: Path | None = ctx.obj.get("config_file")
    sources = resolved.sources

    typer.echo("Athena Settings (resolved):")
    for field_name in (
        "region",
        "aws_profile",
        "workgroup",
        "output_location",
        "database",
        "catalog",
    ):
        source = sources.get(field_name, "default")
        typer.echo(f"  {field_name}: {_display(getattr(resolved, field_name))} ({source})")

    typer.echo("")
    typer.echo("Polling:")
    poll_source = sources.get("poll_interval", "default")
    typer.echo(f"  poll_interval: {resolved.poll_interval}s ({poll_source})")
    max_polls_source = sources.get("max_polls", "default")
    typer.echo(f"  max_polls: {_display(resolved.max_polls)} ({max_polls_source})")
    timeout_source = sources.get("timeout", "default")
    timeout = f"{resolved.timeout}s" if resolved.timeout is not None else "not set"
    typer.echo(f"  timeout: {timeout} ({timeout_source})")
    page_size_source = sources.get("page_size", "default")
    typer.echo(f"  page_size: {_display(resolved.page_size)} ({page_size_source})")

    typer.echo("")
    typer.echo("General:")
    format_source = sources.get("default_format", "default")
    typer.echo(f"  format: {resolved.default_format} ({format_source})")

    typer.echo("")
    if resolved.active_profile:
        typer.echo(f"Active Profile: {resolved.active_profile}")
    else:
        typer.echo("Active Profile: none")

    display_path = config_path or DEFAULT_CONFIG_PATH
    typer.echo(f"Config File: {display_path}")


@config_app.command("profiles")
def config_profiles(ctx: typer.Context) -> None:
    """List available Athena profiles."""
    config_path: Path | None = ctx.obj.get("config_file")
    app_config = load_config(config_path)
    active_profile = ctx.obj.get("profile") or app_config.default_profile

    if not app_config.profiles:
        typer.echo("No profiles configured.")
        display_path = config_path or DEFAULT_CONFIG_PATH
        typer.echo(f"Add profiles to: {display_path}")
        return

    typer.echo("Available Profiles:")
    typer.echo("")
    for name, profile in sorted(app_config.profiles.items()):
        is_active = name == active_profile
        marker = "* " if is_active else "  "
        label = " (active)" if is_active else ""
        typer.echo(f"{marker}{name}{label}")

        display_fields = [("workgroup", profile.workgroup)]
        for field_name in ("region", "database", "catalog", "output_location"):
            value = getattr(profile, field_name)
            if value:
                display_fields.append((field_name, value))

        for field_name, value in display_fields:
            typer.echo(f"      {field_name}: {value}")
        typer.echo("")
