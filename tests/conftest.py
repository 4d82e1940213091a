"""Shared test fixtures for Athena Query."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from athena_query.cli.main import app
from athena_query.testing import ScriptedQueryService


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def service():
    """Scripted query service; every test must consume its whole script."""
    return ScriptedQueryService()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove AWS / Athena variables that would leak into config resolution."""
    for name in (
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_PROFILE",
        "ATHENA_WORKGROUP",
        "ATHENA_OUTPUT_LOCATION",
        "ATHENA_DATABASE",
        "ATHENA_CATALOG",
        "ATHENA_QUERY_PROFILE",
        "ATHENA_QUERY_LOG_LEVEL",
        "ATHENA_QUERY_SENTRY_DSN",
    ):
        monkeypatch.delenv(name, raising=False)
