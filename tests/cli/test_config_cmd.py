"""Tests for the config show / config profiles commands."""

import pytest

pytestmark = pytest.mark.usefixtures("clean_env")

CONFIG_TOML = """\
default_format = "json"
default_profile = "dev"

[profiles.dev]
region = "us-east-1"
workgroup = "dev-wg"
database = "events"

[profiles.prod]
region = "eu-west-1"
output_location = "s3://prod-results/athena/"
poll_interval = 2.0
max_polls = 300
"""


@pytest.fixture
def config_file(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


@pytest.mark.unit
class TestConfigShow:
    def test_defaults_without_file(self, cli_runner, temp_dir):
        missing = temp_dir / "missing.toml"
        result = cli_runner("--config", str(missing), "config", "show")

        assert result.exit_code == 0, result.output
        assert "Athena Settings (resolved):" in result.stdout
        assert "workgroup: primary (default)" in result.stdout
        assert "region: not set (default)" in result.stdout
        assert "poll_interval: 0.5s (default)" in result.stdout
        assert "timeout: not set (default)" in result.stdout
        assert "Active Profile: none" in result.stdout
        assert f"Config File: {missing}" in result.stdout

    def test_default_profile_attribution(self, cli_runner, config_file):
        result = cli_runner("--config", str(config_file), "config", "show")

        assert result.exit_code == 0, result.output
        assert "region: us-east-1 (profile: dev)" in result.stdout
        assert "workgroup: dev-wg (profile: dev)" in result.stdout
        assert "format: json (config)" in result.stdout
        assert "Active Profile: dev" in result.stdout

    def test_selected_profile(self, cli_runner, config_file):
        result = cli_runner(
            "--config", str(config_file), "--profile", "prod", "config", "show"
        )

        assert result.exit_code == 0, result.output
        assert "poll_interval: 2.0s (profile: prod)" in result.stdout
        assert "max_polls: 300 (profile: prod)" in result.stdout
        assert "Active Profile: prod" in result.stdout

    def test_env_and_cli_attribution(self, cli_runner, config_file, monkeypatch):
        monkeypatch.setenv("ATHENA_DATABASE", "env_db")
        result = cli_runner(
            "--config", str(config_file), "--region", "ap-south-1", "config", "show"
        )

        assert result.exit_code == 0, result.output
        assert "region: ap-south-1 (cli: --region)" in result.stdout
        assert "database: env_db (env: ATHENA_DATABASE)" in result.stdout

    def test_unknown_profile(self, cli_runner, config_file):
        result = cli_runner(
            "--config", str(config_file), "--profile", "staging", "config", "show"
        )

        assert result.exit_code != 0
        assert "staging" in str(result.exception)


@pytest.mark.unit
class TestConfigProfiles:
    def test_no_profiles(self, cli_runner, temp_dir):
        result = cli_runner(
            "--config", str(temp_dir / "missing.toml"), "config", "profiles"
        )

        assert result.exit_code == 0
        assert "No profiles configured." in result.stdout

    def test_lists_profiles(self, cli_runner, config_file):
        result = cli_runner("--config", str(config_file), "config", "profiles")

        assert result.exit_code == 0, result.output
        assert "Available Profiles:" in result.stdout
        assert "* dev (active)" in result.stdout
        assert "  prod" in result.stdout
        assert "output_location: s3://prod-results/athena/" in result.stdout

    def test_profile_flag_marks_active(self, cli_runner, config_file):
        result = cli_runner(
            "--config", str(config_file), "--profile", "prod", "config", "profiles"
        )

        assert "* prod (active)" in result.stdout
        assert "* dev" not in result.stdout

    def test_config_without_subcommand_shows_help(self, cli_runner):
        result = cli_runner("config")

        assert result.exit_code == 0
        assert "show" in result.stdout
        assert "profiles" in result.stdout
