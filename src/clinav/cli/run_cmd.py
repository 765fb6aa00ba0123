"""Pick and run a command of a click application.

This module provides the 'clinav run' command and the session flow shared
with 'clinav demo'.
"""

import click

from clinav.catalog.builder import build_tree
from clinav.catalog.click_source import from_click
from clinav.cli.loader import CommandReference
from clinav.cli.styles import THEMES, Messages, make_console
from clinav.engine.controller import Controller
from clinav.engine.renderer import Renderer
from clinav.executor import ClickExecutor
from clinav.utils.config import TUIConfig, load_tui_config
from clinav.utils.logger import get_logger

logger = get_logger("cli")

RENDERERS = ("tui", "prompt")


def make_renderer(kind: str, config: TUIConfig) -> Renderer:
    """Renderer for ``--renderer``: ``tui`` (full terminal) or ``prompt`` (questionary)."""
    if kind == "prompt":
        from clinav.interfaces.prompt import PromptRenderer

        return PromptRenderer(config)

    from clinav.interfaces.tui import TerminalRenderer

    return TerminalRenderer(config)


def session_options(func):
    """Options shared by 'run' and 'demo'."""
    options = [
        click.option("--flat", is_flag=True, help="List all commands in one searchable menu."),
        click.option(
            "--theme",
            type=click.Choice(list(THEMES), case_sensitive=False),
            help="Color theme (default: from config, else 'default').",
        ),
        click.option("--no-confirm", is_flag=True, help="Run without asking for confirmation."),
        click.option("--no-params", is_flag=True, help="Skip the parameter form."),
        click.option(
            "--renderer",
            type=click.Choice(RENDERERS),
            default="tui",
            show_default=True,
            help="Full-terminal picker or line-by-line prompts.",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            help="YAML file with a 'tui:' section (default: $CLINAV_CONFIG or ./clinav.yml).",
        ),
        click.option("--dry-run", is_flag=True, help="Print the resolved command instead of running it."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_config(config_path, flat, theme, no_confirm, no_params) -> TUIConfig:
    """Session configuration from the config file plus command-line overrides."""
    return load_tui_config(
        config_path,
        flat=True if flat else None,
        theme=theme,
        confirm_before_execute=False if no_confirm else None,
        show_parameters=False if no_params else None,
    )


def launch(command: click.Command, config: TUIConfig, renderer: Renderer, dry_run: bool = False):
    """Run one session against ``command`` and execute the chosen command.

    :return: The command's return value, or ``None`` when nothing ran
    """
    console = make_console(None, stderr=True)
    catalog = build_tree(from_click(command))
    logger.debug(f"Loaded {catalog.runnable_count} runnable commands from '{catalog.root.name}'")

    result = Controller(catalog, renderer, config).run()
    if result.cancelled:
        console.print(Messages.warning("Cancelled"))
        return None
    if not result.confirmed:
        console.print(Messages.info("Not executed"))
        return None
    if dry_run:
        click.echo(result.command_line)
        return None
    return ClickExecutor(command, catalog).execute(result)


@click.command()
@click.argument("target", type=CommandReference())
@session_options
def run(target, flat, theme, no_confirm, no_params, renderer, config_path, dry_run):
    """Choose a command of TARGET interactively and run it.

    TARGET names a click command or group as 'package.module:attribute'.

    Examples:

    \b
      clinav run mypkg.cli:app
      clinav run mypkg.cli:app --flat --theme nord
      clinav run mypkg.cli:app --renderer prompt --dry-run
    """
    config = build_config(config_path, flat, theme, no_confirm, no_params)
    launch(target, config, make_renderer(renderer, config), dry_run=dry_run)
