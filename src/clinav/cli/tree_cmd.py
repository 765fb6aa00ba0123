"""Show the command catalog of a click application.

This module provides the 'clinav tree' command.
"""

import click

from clinav.catalog.builder import build_tree
from clinav.catalog.click_source import from_click
from clinav.catalog.display import render_flat, render_tree
from clinav.cli.loader import CommandReference
from clinav.cli.styles import THEMES, get_theme, make_console


@click.command()
@click.argument("target", type=CommandReference())
@click.option("--flat", is_flag=True, help="Numbered list of runnable commands instead of a tree.")
@click.option(
    "--descriptions/--no-descriptions",
    default=True,
    show_default=True,
    help="Show short descriptions.",
)
@click.option("--params", is_flag=True, help="Show each command's parameters.")
@click.option("--theme", type=click.Choice(list(THEMES), case_sensitive=False), default="default")
def tree(target, flat, descriptions, params, theme):
    """Show the commands of TARGET ('package.module:attribute').

    Runnable commands are marked with ✓.

    Examples:

    \b
      clinav tree mypkg.cli:app
      clinav tree mypkg.cli:app --flat --params
    """
    catalog = build_tree(from_click(target))
    console = make_console(get_theme(theme))
    if flat:
        console.print(render_flat(catalog, show_descriptions=descriptions, show_parameters=params))
    else:
        console.print(render_tree(catalog, show_descriptions=descriptions, show_parameters=params))
