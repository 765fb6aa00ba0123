"""Tests for main CLI entry point.

Tests the main CLI group, lazy command loading and exit code mapping.
"""

import logging
from unittest import mock

import click
import pytest
from click.testing import CliRunner

from clinav import __version__
from clinav.cli.main import COMMANDS, LazyGroup, cli, main
from clinav.errors import ConfigurationError


@pytest.fixture
def runner():
    """Provide a Click CLI runner for testing."""
    return CliRunner()


class TestLazyGroup:
    """Test the LazyGroup command loading mechanism."""

    def test_list_commands(self):
        """Verify list_commands returns every registered command."""
        group = LazyGroup(name="test")
        assert group.list_commands(mock.Mock()) == ["run", "tree", "themes", "demo"]

    def test_get_command_imports_module(self):
        """Test get_command imports the command's module on demand."""
        group = LazyGroup(name="test")

        with mock.patch("importlib.import_module") as mock_import:
            mock_import.return_value = mock.Mock(tree="tree-command")
            assert group.get_command(mock.Mock(), "tree") == "tree-command"

        mock_import.assert_called_once_with(COMMANDS["tree"][0])

    def test_get_command_unknown(self):
        """Test get_command returns None for unknown commands."""
        assert LazyGroup(name="test").get_command(mock.Mock(), "nonexistent") is None

    def test_every_command_loads(self):
        """Every registered command resolves to a click command."""
        group = LazyGroup(name="test")
        for name in COMMANDS:
            assert isinstance(group.get_command(mock.Mock(), name), click.Command)


class TestCliGroup:
    """Test the top-level group."""

    def test_help_lists_commands(self, runner):
        """--help shows the lazily loaded subcommands."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in COMMANDS:
            assert name in result.output

    def test_version(self, runner):
        """--version prints the package version."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_enables_debug(self, runner, restore_log_level):
        """-v lowers the clinav logger to DEBUG."""
        result = runner.invoke(cli, ["-v", "themes", "minimal"])

        assert result.exit_code == 0
        assert restore_log_level.level == logging.DEBUG


class TestMain:
    """Test exit codes of the console script."""

    def _exit_code(self, **patch_kwargs):
        with mock.patch.object(cli, "main", **patch_kwargs):
            with pytest.raises(SystemExit) as exc_info:
                main()
        return exc_info.value.code

    def test_success(self):
        """A command returning nothing exits 0."""
        assert self._exit_code(return_value=None) == 0

    def test_integer_result(self):
        """An integer result becomes the exit code."""
        assert self._exit_code(return_value=3) == 3

    def test_keyboard_interrupt(self, capsys):
        """Ctrl+C exits 130."""
        assert self._exit_code(side_effect=KeyboardInterrupt) == 130
        assert "Cancelled" in capsys.readouterr().err

    def test_abort(self):
        """click.Abort is treated like Ctrl+C."""
        assert self._exit_code(side_effect=click.Abort()) == 130

    def test_usage_error(self, capsys):
        """Click usage errors keep their exit code and message."""
        assert self._exit_code(side_effect=click.UsageError("No such option")) == 2
        assert "No such option" in capsys.readouterr().err

    def test_clinav_error(self, capsys):
        """Engine errors print the message and suggestion."""
        error = ConfigurationError("Unknown theme 'x'", suggestion="Available themes: default")

        assert self._exit_code(side_effect=error) == 1
        err = capsys.readouterr().err
        assert "Error: Unknown theme 'x'" in err
        assert "Available themes: default" in err

    def test_unexpected_error(self, capsys):
        """Any other exception exits 1 with its message."""
        assert self._exit_code(side_effect=RuntimeError("boom")) == 1
        assert "boom" in capsys.readouterr().err

    def test_version_through_main(self, capsys):
        """--version through the console script exits 0."""
        with mock.patch("sys.argv", ["clinav", "--version"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
