"""Try the picker on the bundled demo application.

This module provides the 'clinav demo' command.
"""

import click

from clinav.cli.demo_app import app
from clinav.cli.run_cmd import build_config, launch, make_renderer, session_options


@click.command()
@session_options
def demo(flat, theme, no_confirm, no_params, renderer, config_path, dry_run):
    """Pick and run a command of a small demo application.

    Examples:

    \b
      clinav demo
      clinav demo --flat --theme dracula
      clinav demo --renderer prompt
    """
    config = build_config(config_path, flat, theme, no_confirm, no_params)
    launch(app, config, make_renderer(renderer, config), dry_run=dry_run)
