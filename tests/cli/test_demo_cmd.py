"""Tests for the 'demo' command and the bundled demo application."""

from unittest import mock

import pytest
from click.testing import CliRunner

from clinav.cli.demo_app import app
from clinav.cli.main import cli
from clinav.engine.loop import ScriptedDriver, keys
from clinav.engine.renderer import MachineRenderer


@pytest.fixture
def runner():
    """Provide a Click CLI runner for testing."""
    return CliRunner()


class TestDemoCommand:
    """Test running the picker on the demo application."""

    def test_dry_run(self, runner):
        """The demo resolves a deploy command line."""
        renderer = MachineRenderer(
            ScriptedDriver(keys("enter", "e", "a", "p", "i", "enter", "down", "right", "right", "enter", "y"))
        )
        with mock.patch("clinav.cli.demo_cmd.make_renderer", return_value=renderer):
            result = runner.invoke(cli, ["demo", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "shipyard deploy --env=prod api"

    def test_cancel(self, runner):
        """Cancelling the demo runs nothing."""
        renderer = MachineRenderer(ScriptedDriver(keys("q")))
        with mock.patch("clinav.cli.demo_cmd.make_renderer", return_value=renderer):
            result = runner.invoke(cli, ["demo"])

        assert result.exit_code == 0
        assert result.stdout == ""


class TestDemoApp:
    """Test the demo application itself."""

    def test_deploy(self, runner):
        """deploy echoes what it would do, including group options."""
        result = runner.invoke(app, ["--region", "us-east", "deploy", "api", "--env", "prod", "--timeout", "90s"])

        assert result.exit_code == 0, result.output
        assert "Deploying api to prod in us-east" in result.output
        assert "timeout 0:01:30" in result.output

    def test_db_requires_subcommand(self, runner):
        """db is a plain group."""
        result = runner.invoke(app, ["db"])
        assert "migrate" in result.output

    def test_logs_without_subcommand(self, runner):
        """logs runs by itself."""
        result = runner.invoke(app, ["logs"])
        assert result.output.strip() == "Showing all logs"

    def test_backup_requires_output(self, runner):
        """backup refuses to run without --output."""
        result = runner.invoke(app, ["db", "backup"])
        assert result.exit_code == 2
