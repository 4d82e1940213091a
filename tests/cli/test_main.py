"""Tests for the CLI entry point."""

import sys
from unittest.mock import patch

import pytest

from athena_query import __version__
from athena_query.cli.main import app, run
from athena_query.core.exit_codes import ExitCode
from athena_query.testing import ScriptedQueryService


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Athena Query" in result.stdout

    def test_no_args_shows_help(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 0 or result.exit_code == 2
        assert "Athena Query" in result.stdout or "Usage" in result.stdout


@pytest.mark.unit
class TestCliVersion:
    def test_version_flag(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"athena-query {__version__}" in result.stdout

    def test_version_short_flag(self, runner):
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert f"athena-query {__version__}" in result.stdout


@pytest.mark.unit
class TestUnknownCommand:
    def test_unknown_command_fails(self, runner):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0


@pytest.mark.unit
@pytest.mark.usefixtures("clean_env")
class TestRunEntryPoint:
    def test_error_maps_to_exit_code(self, temp_dir, monkeypatch, capsys):
        service = ScriptedQueryService()
        service.expect_start("SELECT 1", "h1")
        service.expect_status("h1", "FAILED", reason="SYNTAX_ERROR")
        monkeypatch.setattr(
            sys,
            "argv",
            ["athena-query", "--config", str(temp_dir / "none.toml"), "query", "-e", "SELECT 1"],
        )

        with (
            patch("athena_query.cli.commands.query.get_service", return_value=service),
            pytest.raises(SystemExit) as exc_info,
        ):
            run()

        assert exc_info.value.code == ExitCode.QUERY_FAILED
        assert "Error: Query h1 finished in state FAILED: SYNTAX_ERROR" in capsys.readouterr().err

    def test_config_error_exit_code(self, temp_dir, monkeypatch, capsys):
        config_file = temp_dir / "config.toml"
        config_file.write_text("not = [valid")
        monkeypatch.setattr(
            sys,
            "argv",
            ["athena-query", "--config", str(config_file), "config", "show"],
        )

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == ExitCode.CONFIG_ERROR
        assert "Malformed TOML" in capsys.readouterr().err

    def test_unknown_default_format_is_config_error(self, temp_dir, monkeypatch, capsys):
        config_file = temp_dir / "config.toml"
        config_file.write_text('default_format = "xml"\n')
        monkeypatch.setattr(
            sys,
            "argv",
            ["athena-query", "--config", str(config_file), "query", "-e", "SELECT 1"],
        )

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == ExitCode.CONFIG_ERROR
        assert "Invalid default_format" in capsys.readouterr().err
