"""Tests for the rich tree and table views of a catalog."""

from io import StringIO

import pytest

from clinav.catalog.builder import build_tree
from clinav.catalog.display import RUNNABLE_MARK, parameter_label, render_flat, render_tree
from clinav.catalog.types import ParameterDefinition, ParameterType, StaticCommand
from clinav.cli.styles import make_console


def _printed(renderable) -> str:
    buffer = StringIO()
    console = make_console(None, file=buffer, width=120, color_system=None)
    console.print(renderable)
    return buffer.getvalue()


class TestParameterLabel:
    """Test how parameters are named in listings."""

    @pytest.mark.parametrize(
        "definition,expected",
        [
            (ParameterDefinition("output", short_name="o"), "-o, --output"),
            (ParameterDefinition("canary", type=ParameterType.BOOL, negative_name="no-canary"), "--canary, --no-canary"),
            (ParameterDefinition("service", positional=True), "SERVICE"),
            (ParameterDefinition("files", positional=True, multiple=True), "FILES..."),
        ],
    )
    def test_labels(self, definition, expected):
        """Options show their flags, positionals their metavar."""
        assert parameter_label(definition) == expected


class TestRenderTree:
    """Test the tree view."""

    def test_contains_every_command(self, sample_catalog):
        """All nodes appear, runnable ones with a mark."""
        output = _printed(render_tree(sample_catalog))

        assert "Command Tree (3 commands)" in output
        for name in ("app", "a", "b", "c", "d"):
            assert name in output
        assert output.count(RUNNABLE_MARK) == 3

    def test_descriptions_optional(self, sample_catalog):
        """Descriptions can be left out."""
        assert "Leaf C" in _printed(render_tree(sample_catalog))
        assert "Leaf C" not in _printed(render_tree(sample_catalog, show_descriptions=False))

    def test_parameters(self, deploy_catalog):
        """Parameters are listed under their command when asked for."""
        output = _printed(render_tree(deploy_catalog, show_parameters=True))

        assert "--replicas <int>" in output
        assert "SERVICE <string> (required)" in output
        assert "-v, --verbose" in output


class TestRenderFlat:
    """Test the numbered table view."""

    def test_rows_in_menu_order(self, sample_catalog):
        """Rows follow the flattened order."""
        output = _printed(render_flat(sample_catalog))
        lines = [line for line in output.splitlines() if "Leaf" in line]

        assert "Command Tree (3 commands)" in output
        assert "Leaf A" in lines[0]
        assert "Leaf C" in lines[1]
        assert "Leaf D" in lines[2]
        assert "b c" in lines[1]

    def test_parameter_column(self, deploy_catalog):
        """The parameter column lists each command's own parameters."""
        output = _printed(render_flat(deploy_catalog, show_parameters=True))

        assert "Parameters" in output
        assert "--env <enum>" in output

    def test_empty_catalog(self):
        """A catalog with nothing runnable gives an empty table."""
        output = _printed(render_flat(build_tree(StaticCommand("app"))))

        assert "Command Tree (0 commands)" in output
