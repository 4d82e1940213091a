from __future__ import annotations

import asyncio
import sys
from typing import Annotated

import typer

from athena_query.cli.commands._shared import (
    get_resolved_config,
    get_service,
    output_result,
)
from athena_query.core.exceptions import InputError
from athena_query.core.exit_codes import ExitCode
from athena_query.core.logging import get_logger
from athena_query.core.query_source import resolve_query_source
from athena_query.core.runner import collect_records


def query_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="SQL file to execute"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Execute inline SQL query"),
    ] = None,
    poll_interval: Annotated[
        float | None,
        typer.Option("--poll-interval", help="Seconds between status checks"),
    ] = None,
    max_polls: Annotated[
        int | None,
        typer.Option("--max-polls", help="Give up after this many status checks"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Give up waiting after this many seconds"),
    ] = None,
) -> None:
    """Execute a SQL query on Athena from file, inline (-e), or stdin."""
    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if execute is None and file is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        sql = resolve_query_source(inline=execute, file_path=file)
    except InputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(ExitCode.INPUT_ERROR) from exc

    resolved = get_resolved_config(
        ctx, poll_interval=poll_interval, max_polls=max_polls, timeout=timeout
    )
    service = get_service(resolved)
    result = asyncio.run(collect_records(service, sql, **resolved.runner_options()))

    log = get_logger("athena_query.cli")
    if result.summary is not None:
        log.debug(
            "query finished",
            execution_handle=result.summary.execution_handle,
            records=result.summary.record_count,
            pages=result.summary.page_count,
        )
    output_result(ctx, result, resolved)
