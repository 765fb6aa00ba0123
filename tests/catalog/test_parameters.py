"""Tests for parameter collection, application and argument rendering."""

from datetime import timedelta

import pytest

from clinav.catalog.builder import build_tree
from clinav.catalog.parameters import apply, build_argv, collect, command_line, is_reserved
from clinav.catalog.types import ParameterDefinition, ParameterType, StaticCommand
from clinav.errors import ValidationError


def _single(*parameters, **kwargs):
    """Catalog whose only child ``run`` declares ``parameters``."""
    root = StaticCommand("tool", children=[StaticCommand("run", runnable=True, parameters=list(parameters), **kwargs)])
    catalog = build_tree(root)
    return catalog, catalog.find(["run"]).index


class TestCollect:
    """Test gathering parameters along the scope chain."""

    def test_closest_scope_wins(self):
        """A name declared by the node shadows the same name on an ancestor."""
        root = StaticCommand(
            "app",
            children=[
                StaticCommand(
                    "y",
                    parameters=[ParameterDefinition("p", default_value="2")],
                    children=[StaticCommand("x", runnable=True, parameters=[ParameterDefinition("p", default_value="1")])],
                )
            ],
        )
        catalog = build_tree(root)

        specs = collect(catalog, catalog.find(["y", "x"]).index)

        assert [(spec.name, spec.current_value, spec.source_scope) for spec in specs] == [("p", "1", "x")]

    def test_order_node_first_then_ancestors(self, deploy_catalog):
        """Own parameters come first in declaration order, then inherited ones."""
        specs = collect(deploy_catalog, deploy_catalog.find(["deploy"]).index)

        assert [spec.name for spec in specs] == ["env", "replicas", "service", "verbose"]
        assert specs[-1].source_scope == "ship"
        assert specs[0].source_scope == "deploy"

    def test_spec_fields_copied_from_definition(self, deploy_catalog):
        """Types, defaults and options carry over to the spec."""
        env = collect(deploy_catalog, deploy_catalog.find(["deploy"]).index)[0]

        assert env.type is ParameterType.ENUM
        assert env.default_value == "dev"
        assert env.current_value == "dev"
        assert env.option_values == ("dev", "prod")

    def test_inherited_only(self, deploy_catalog):
        """A command without parameters still sees its ancestors' parameters."""
        specs = collect(deploy_catalog, deploy_catalog.find(["status"]).index)
        assert [spec.name for spec in specs] == ["verbose"]

    def test_reserved_names_hidden(self):
        """Engine-owned names are never collected."""
        catalog, index = _single(
            ParameterDefinition("help", type=ParameterType.BOOL),
            ParameterDefinition("tui", type=ParameterType.BOOL),
            ParameterDefinition("tui-theme"),
            ParameterDefinition("name"),
        )

        assert [spec.name for spec in collect(catalog, index)] == ["name"]

    def test_is_reserved(self):
        """Reserved names are help, tui and the tui- prefix."""
        assert is_reserved("help")
        assert is_reserved("tui-flat")
        assert not is_reserved("tuition")


class TestApply:
    """Test converting form values through their definitions."""

    def test_values_converted(self, deploy_catalog):
        """Accepted values are converted by type and bound to their scope."""
        index = deploy_catalog.find(["deploy"]).index

        result = apply(deploy_catalog, index, {"replicas": "3", "verbose": "true", "service": "api"})

        assert result.ok
        assert result.error is None
        assert result.as_dict() == {"replicas": 3, "verbose": True, "service": "api"}
        scopes = {assignment.name: assignment.scope for assignment in result.assignments}
        assert scopes["verbose"] == 0
        assert scopes["replicas"] == index

    def test_best_effort(self, deploy_catalog):
        """A rejected value is reported while the others are still applied."""
        index = deploy_catalog.find(["deploy"]).index

        result = apply(deploy_catalog, index, {"replicas": "many", "env": "prod"})

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert result.error.parameter == "replicas"
        assert result.as_dict() == {"env": "prod"}

    def test_unknown_and_reserved_rejected(self, deploy_catalog):
        """Names outside the scope chain are errors."""
        index = deploy_catalog.find(["status"]).index

        result = apply(deploy_catalog, index, {"replicas": "2", "help": "true"})

        assert [error.parameter for error in result.errors] == ["replicas", "help"]
        assert result.assignments == ()

    def test_required_empty_rejected(self, deploy_catalog):
        """An empty required value is an error, an empty optional one is None."""
        index = deploy_catalog.find(["deploy"]).index

        result = apply(deploy_catalog, index, {"service": "", "replicas": ""})

        assert [error.parameter for error in result.errors] == ["service"]
        assert result.as_dict() == {"replicas": None}

    def test_enum_outside_options_rejected(self, deploy_catalog):
        """Enum values must be one of the declared options."""
        index = deploy_catalog.find(["deploy"]).index

        result = apply(deploy_catalog, index, {"env": "qa"})

        assert "not one of dev, prod" in result.error.message

    def test_custom_validator(self):
        """A definition's validator converts and may reject values."""

        def positive(raw):
            value = int(raw)
            if value <= 0:
                raise ValueError("must be positive")
            return value

        catalog, index = _single(ParameterDefinition("count", validator=positive))

        assert apply(catalog, index, {"count": "4"}).as_dict() == {"count": 4}
        error = apply(catalog, index, {"count": "-1"}).error
        assert error.message == "Invalid 'count': must be positive"

    def test_duration(self):
        """Durations convert to timedelta."""
        catalog, index = _single(ParameterDefinition("timeout", type=ParameterType.DURATION))
        assert apply(catalog, index, {"timeout": "1m30s"}).as_dict() == {"timeout": timedelta(seconds=90)}

    def test_catalog_untouched(self, deploy_catalog):
        """Applying values never changes the catalog's defaults."""
        index = deploy_catalog.find(["deploy"]).index
        apply(deploy_catalog, index, {"replicas": "9"})
        assert collect(deploy_catalog, index)[1].current_value == "1"


class TestBuildArgv:
    """Test rendering assignments as command-line tokens."""

    def test_scopes_options_and_positionals(self, deploy_catalog):
        """Each scope contributes its name, then changed options, then positionals."""
        index = deploy_catalog.find(["deploy"]).index
        result = apply(deploy_catalog, index, {"env": "prod", "replicas": "3", "service": "api", "verbose": "true"})

        assert build_argv(deploy_catalog, index, result.assignments) == [
            "--verbose",
            "deploy",
            "--env=prod",
            "--replicas=3",
            "api",
        ]
        assert command_line(deploy_catalog, index, result.assignments) == (
            "ship --verbose deploy --env=prod --replicas=3 api"
        )

    def test_defaults_omitted(self, deploy_catalog):
        """Options left at their default produce no tokens."""
        index = deploy_catalog.find(["deploy"]).index
        result = apply(deploy_catalog, index, {"env": "dev", "replicas": "1", "service": "web", "verbose": "false"})

        assert build_argv(deploy_catalog, index, result.assignments) == ["deploy", "web"]

    def test_negative_flag(self):
        """Turning off a flag that defaults on uses its negative name."""
        catalog, index = _single(
            ParameterDefinition("compress", type=ParameterType.BOOL, default_value="true", negative_name="no-compress")
        )
        result = apply(catalog, index, {"compress": "false"})

        assert build_argv(catalog, index, result.assignments) == ["run", "--no-compress"]

    def test_false_flag_without_negative(self):
        """A disabled flag without a negative form is simply left out."""
        catalog, index = _single(ParameterDefinition("force", type=ParameterType.BOOL, default_value="true"))
        result = apply(catalog, index, {"force": "false"})

        assert build_argv(catalog, index, result.assignments) == ["run"]

    def test_single_letter_option(self):
        """Single-letter names use the short form with a separate value."""
        catalog, index = _single(ParameterDefinition("n", default_value="1"))
        result = apply(catalog, index, {"n": "5"})

        assert build_argv(catalog, index, result.assignments) == ["run", "-n", "5"]

    def test_multiple_values(self):
        """Multi-valued options repeat the flag for each shell word."""
        catalog, index = _single(ParameterDefinition("tag", multiple=True))
        result = apply(catalog, index, {"tag": "a 'b c'"})

        assert build_argv(catalog, index, result.assignments) == ["run", "--tag=a", "--tag=b c"]

    def test_command_line_quotes(self):
        """The preview is shell-quoted."""
        catalog, index = _single(ParameterDefinition("message"))
        result = apply(catalog, index, {"message": "hello world"})

        assert command_line(catalog, index, result.assignments) == "tool run '--message=hello world'"

    @pytest.mark.parametrize("raw", ["", "plain"])
    def test_positional_empty_skipped(self, raw):
        """Empty positionals are not rendered."""
        catalog, index = _single(ParameterDefinition("target", positional=True))
        result = apply(catalog, index, {"target": raw})

        expected = ["run", raw] if raw else ["run"]
        assert build_argv(catalog, index, result.assignments) == expected
