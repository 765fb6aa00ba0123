"""Click adapter - expose a click command tree as command definitions.

:func:`from_click` wraps a :class:`click.Command` (usually a group) in
:class:`ClickDefinition` views that satisfy the
:class:`~clinav.catalog.types.CommandDefinition` protocol. A view holds a
reference to the click object plus the name it is registered under; each
click object is wrapped once per name, so a group registered inside itself
shows up as a cycle instead of an endless tree.

Hidden commands and options are skipped, as are eager options that expose no
value (``--help``, ``--version``).
"""

import shlex
from datetime import timedelta
from functools import cached_property

import click

from clinav.catalog.types import ParameterDefinition, ParameterOption, ParameterType
from clinav.catalog.values import BOOL_FALSE, BOOL_TRUE, format_duration, parse_duration, to_text
from clinav.errors import ValidationError

# Set by clinav.enhance on groups that required a subcommand before they were enhanced
REQUIRES_SUBCOMMAND = "clinav_requires_subcommand"

# Set by clinav.enhance on the --tui options it adds; they are never offered in the form
SESSION_OPTION = "clinav_session_option"


class Duration(click.ParamType):
    """Click parameter type for durations such as ``30s`` or ``1h30m``.

    Converts to :class:`datetime.timedelta` and is presented as a duration
    field by the form engine.
    """

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(str(value))
        except ValueError as exc:
            self.fail(str(exc), param, ctx)

    def __repr__(self) -> str:
        return "DURATION"


def _parameter_type(param: click.Parameter) -> ParameterType:
    if isinstance(param, click.Option) and param.is_bool_flag:
        return ParameterType.BOOL
    if isinstance(param.type, click.types.BoolParamType):
        # A boolean that takes a value is offered as a true/false choice
        return ParameterType.ENUM
    if isinstance(param.type, click.types.IntParamType):
        return ParameterType.INT
    if isinstance(param.type, click.Choice):
        return ParameterType.ENUM
    if isinstance(param.type, Duration):
        return ParameterType.DURATION
    return ParameterType.STRING


def _long_name(opts: list[str]) -> str | None:
    for opt in opts:
        if opt.startswith("--"):
            return opt[2:]
    return None


def _short_name(opts: list[str]) -> str:
    for opt in opts:
        if len(opt) == 2 and opt[0] == "-" and opt[1] != "-":
            return opt[1]
    return ""


def _default_text(param: click.Parameter, kind: ParameterType) -> str:
    default = param.default
    if default is getattr(click.core, "UNSET", None):
        # Newer click marks a missing default with a sentinel instead of None
        return BOOL_FALSE if kind is ParameterType.BOOL else ""
    if callable(default):
        # Dynamic defaults are resolved by click at invocation time
        return ""
    if isinstance(default, timedelta):
        return format_duration(default)
    text = to_text(default)
    if kind is ParameterType.BOOL and text == "":
        return BOOL_FALSE
    return text


def _click_validator(param: click.Parameter, name: str):
    """Wrap ``param.type.convert`` as a setter that raises :class:`ValidationError`."""
    several = param.multiple or param.nargs != 1

    def validate(raw: str):
        try:
            if several:
                return tuple(param.type.convert(item, param, None) for item in shlex.split(raw))
            return param.type.convert(raw, param, None)
        except click.BadParameter as exc:
            raise ValidationError(exc.format_message(), parameter=name) from exc

    return validate


def parameter_from_click(param: click.Parameter) -> ParameterDefinition | None:
    """Translate one click parameter, or return ``None`` if it should stay hidden."""
    if getattr(param, "hidden", False):
        return None
    if param.is_eager and not param.expose_value:
        return None
    if getattr(param, SESSION_OPTION, False):
        return None

    if isinstance(param, click.Option) and ((param.is_flag and not param.is_bool_flag) or param.count):
        return None

    kind = _parameter_type(param)
    positional = isinstance(param, click.Argument)

    if positional:
        name = param.name
        short_name = ""
        negative_name = None
    else:
        name = _long_name(param.opts) or _short_name(param.opts) or param.name
        short_name = _short_name(param.opts)
        negative_name = _long_name(param.secondary_opts)

    options = ()
    if isinstance(param.type, click.Choice):
        options = tuple(ParameterOption(value=str(choice)) for choice in param.type.choices)
    elif kind is ParameterType.ENUM:
        options = (ParameterOption(value=BOOL_TRUE), ParameterOption(value=BOOL_FALSE))

    validator = None if kind is ParameterType.BOOL else _click_validator(param, name)

    return ParameterDefinition(
        name=name,
        short_name=short_name,
        usage=getattr(param, "help", None) or "",
        default_value=_default_text(param, kind),
        type=kind,
        validator=validator,
        options=options,
        required=param.required,
        positional=positional,
        negative_name=negative_name,
        multiple=param.multiple or param.nargs != 1,
    )


class ClickDefinition:
    """Read-only view of a click command under a given name."""

    def __init__(self, command: click.Command, name: str, views: dict | None = None):
        self.command = command
        self.name = name
        # Shared by every view of one tree: (id(command), name) -> view
        self._views = views if views is not None else {}
        self._views.setdefault((id(command), name), self)

    def __repr__(self) -> str:
        return f"ClickDefinition({self.name!r})"

    def _context(self) -> click.Context:
        return click.Context(self.command, info_name=self.name)

    @property
    def is_group(self) -> bool:
        return isinstance(self.command, click.Group)

    @property
    def usage(self) -> str:
        pieces = self.command.collect_usage_pieces(self._context())
        return " ".join([self.name, *pieces])

    @property
    def short_description(self) -> str:
        return self.command.get_short_help_str(limit=80)

    @property
    def long_description(self) -> str:
        return self.command.help or ""

    @property
    def runnable(self) -> bool:
        if self.is_group:
            if getattr(self.command, REQUIRES_SUBCOMMAND, False):
                return False
            return bool(self.command.invoke_without_command) and self.command.callback is not None
        return self.command.callback is not None

    @cached_property
    def children(self) -> list["ClickDefinition"]:
        if not self.is_group:
            return []

        group = self.command
        ctx = self._context()
        if type(group).list_commands is click.Group.list_commands:
            # Plain groups: keep declaration order rather than click's sorted listing
            names = list(group.commands)
        else:
            names = group.list_commands(ctx)

        children = []
        for name in names:
            command = group.get_command(ctx, name)
            if command is None or command.hidden:
                continue
            view = self._views.get((id(command), name))
            if view is None:
                view = ClickDefinition(command, name, self._views)
            children.append(view)
        return children

    @cached_property
    def parameters(self) -> list[ParameterDefinition]:
        definitions = []
        for param in self.command.params:
            definition = parameter_from_click(param)
            if definition is not None:
                definitions.append(definition)
        return definitions


def from_click(command: click.Command, name: str | None = None) -> ClickDefinition:
    """Wrap a click command tree for :func:`~clinav.catalog.builder.build_tree`.

    :param command: Root click command or group
    :param name: Name to show for the root (defaults to ``command.name``)
    """
    return ClickDefinition(command, name or command.name or "cli")
