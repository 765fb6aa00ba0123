"""
Add an interactive mode to an existing click group

    from clinav.enhance import enhance

    @click.group()
    def cli():
        ...

    enhance(cli)

After :func:`enhance`, ``cli --tui`` (or ``CLINAV_TUI=1 cli``, or a config
with ``enabled: true`` on a terminal) opens the command picker instead of
requiring a subcommand. The chosen command then runs as if it had been typed.
Invocations with a subcommand are untouched.

Options added to the group:

    --tui                          Start the interactive picker
    --tui-theme NAME               Color theme
    --tui-confirm/--no-tui-confirm Ask before running the chosen command
    --tui-flags/--no-tui-flags     Offer the parameter form
    --tui-flat                     One searchable list of all commands
"""

from collections.abc import Callable

import click
from click.core import ParameterSource

from clinav.catalog.builder import build_tree
from clinav.catalog.click_source import REQUIRES_SUBCOMMAND, SESSION_OPTION, from_click
from clinav.cli.styles import THEMES
from clinav.engine.controller import Controller
from clinav.engine.renderer import Renderer
from clinav.executor import ClickExecutor
from clinav.utils.config import TUIConfig, should_use_tui
from clinav.utils.logger import get_logger

logger = get_logger("enhance")

META_KEY = "clinav.options"

# Set on a group while the command chosen in its session runs
_RUNNING_CHOICE = "clinav_running_choice"

# Option name -> TUIConfig field it overrides
_OVERRIDES = {
    "tui_theme": "theme",
    "tui_confirm": "confirm_before_execute",
    "tui_flags": "show_parameters",
    "tui_flat": "flat",
}


def _store_option(ctx: click.Context, param: click.Parameter, value):
    """Keep TUI options out of the callback's arguments; values left at their default are ``None``."""
    if ctx.get_parameter_source(param.name) in (ParameterSource.DEFAULT, None):
        value = None
    ctx.meta.setdefault(META_KEY, {})[param.name] = value
    return value


def tui_options() -> list[click.Option]:
    """The options :func:`enhance` adds, in help order."""
    options = [
        click.Option(
            ["--tui"],
            is_flag=True,
            expose_value=False,
            callback=_store_option,
            help="Choose a command interactively.",
        ),
        click.Option(
            ["--tui-theme"],
            type=click.Choice(list(THEMES), case_sensitive=False),
            expose_value=False,
            callback=_store_option,
            help="Color theme for the interactive picker.",
        ),
        click.Option(
            ["--tui-confirm/--no-tui-confirm"],
            default=True,
            expose_value=False,
            callback=_store_option,
            help="Ask before running the chosen command.",
        ),
        click.Option(
            ["--tui-flags/--no-tui-flags"],
            default=True,
            expose_value=False,
            callback=_store_option,
            help="Offer a form for the command's parameters.",
        ),
        click.Option(
            ["--tui-flat"],
            is_flag=True,
            expose_value=False,
            callback=_store_option,
            help="List all commands in one searchable menu.",
        ),
    ]
    for option in options:
        setattr(option, SESSION_OPTION, True)
    return options


def _default_renderer(config: TUIConfig) -> Renderer:
    from clinav.interfaces.tui import TerminalRenderer

    return TerminalRenderer(config)


def session_config(base: TUIConfig, options: dict) -> TUIConfig:
    """Apply ``--tui-*`` options given on the command line to ``base``."""
    return base.with_overrides(**{field: options.get(name) for name, field in _OVERRIDES.items()})


def enhance(
    group: click.Group,
    config: TUIConfig | None = None,
    renderer_factory: Callable[[TUIConfig], Renderer] | None = None,
) -> click.Group:
    """Give ``group`` an interactive mode. The group is modified in place and returned.

    :param group: Root click group of an application
    :param config: Session options; :class:`TUIConfig` defaults when ``None``
    :param renderer_factory: Builds the renderer for a session; the terminal
        renderer by default
    """
    base_config = config or TUIConfig()
    make_renderer = renderer_factory or _default_renderer
    original_callback = group.callback
    needs_subcommand = not group.invoke_without_command

    group.params.extend(tui_options())
    group.invoke_without_command = True
    # Starting without arguments must reach the callback, which decides on the TUI
    group.no_args_is_help = False
    setattr(group, REQUIRES_SUBCOMMAND, needs_subcommand)

    def callback(*args, **kwargs):
        ctx = click.get_current_context()
        options = ctx.meta.get(META_KEY, {})
        session = session_config(base_config, options)

        running_choice = getattr(group, _RUNNING_CHOICE, False)
        if (
            ctx.invoked_subcommand is None
            and not running_choice
            and should_use_tui(session, flag=bool(options.get("tui")))
        ):
            return run_session(group, ctx.info_name, session, make_renderer)

        result = original_callback(*args, **kwargs) if original_callback is not None else None
        if ctx.invoked_subcommand is None and needs_subcommand:
            click.echo(ctx.get_help(), color=ctx.color)
            ctx.exit()
        return result

    group.callback = callback
    logger.debug(f"Enhanced click group '{group.name}'")
    return group


def run_session(
    group: click.Group,
    prog_name: str | None,
    config: TUIConfig,
    renderer_factory: Callable[[TUIConfig], Renderer] | None = None,
):
    """Pick a command from ``group`` interactively and run it.

    :return: The chosen command's return value, or ``None`` if nothing ran
    """
    catalog = build_tree(from_click(group, name=prog_name))
    renderer = (renderer_factory or _default_renderer)(config)
    result = Controller(catalog, renderer, config).run()
    if result.cancelled:
        click.echo("Cancelled.", err=True)
        return None
    if not result.confirmed:
        click.echo("Not executed.", err=True)
        return None
    # The wrapped callback never opens a session while this is set
    setattr(group, _RUNNING_CHOICE, True)
    try:
        return ClickExecutor(group, catalog, prog_name=prog_name).execute(result)
    finally:
        setattr(group, _RUNNING_CHOICE, False)
