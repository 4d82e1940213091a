"""Athena Query main entry point and command registration."""

from __future__ import annotations

import atexit
from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from athena_query.__about__ import __version__
from athena_query.cli.commands.config import config_app
from athena_query.cli.commands.query import query_command
from athena_query.cli.output import OutputFormat  # noqa: TC001
from athena_query.core.exceptions import AthenaQueryError
from athena_query.core.logging import setup_logging
from athena_query.core.monitoring import setup_sentry

app = typer.Typer(
    help="Athena Query - run AWS Athena queries and page through the results",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("query")(query_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"athena-query {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Write logs to stderr as JSON lines"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named Athena profile"),
    ] = None,
    region: Annotated[
        str | None,
        typer.Option("--region", "-r", help="AWS region"),
    ] = None,
    aws_profile: Annotated[
        str | None,
        typer.Option("--aws-profile", help="AWS credentials profile"),
    ] = None,
    workgroup: Annotated[
        str | None,
        typer.Option("--workgroup", "-w", help="Athena workgroup"),
    ] = None,
    output_location: Annotated[
        str | None,
        typer.Option("--output-location", "-o", help="S3 URI for query results"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Default database for queries"),
    ] = None,
    catalog: Annotated[
        str | None,
        typer.Option("--catalog", help="Data catalog for queries"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Column width for table format"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV output"),
    ] = False,
) -> None:
    """Athena Query - run AWS Athena queries and page through the results."""
    setup_logging(verbose, json_logs=json_logs)
    if setup_sentry():
        transaction = sentry_sdk.start_transaction(
            op="cli", name=ctx.invoked_subcommand or "athena-query"
        )
        transaction.__enter__()

        def cleanup() -> None:
            transaction.__exit__(None, None, None)
            sentry_sdk.flush(timeout=2)

        atexit.register(cleanup)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["region"] = region
    ctx.obj["aws_profile"] = aws_profile
    ctx.obj["workgroup"] = workgroup
    ctx.obj["output_location"] = output_location
    ctx.obj["database"] = database
    ctx.obj["catalog"] = catalog
    ctx.obj["config_file"] = config_file

    # Format options (global)
    fmt = "table" if table else (format.value if format else None)
    ctx.obj["format"] = fmt
    ctx.obj["compact"] = compact
    ctx.obj["width"] = width
    ctx.obj["no_header"] = no_header


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except AthenaQueryError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
